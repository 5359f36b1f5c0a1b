import logging
import math
import os
import time
import uuid

import dropbox
from dropbox.exceptions import ApiError
from flask import current_app
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = {"mp4", "webm", "avi", "mov", "wmv"}
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "svg"}


def file_extension(filename):
    return filename.rsplit(".", 1)[1].lower() if "." in filename else ""


def unique_filename(original_name, prefix="file"):
    """`<prefix>-<millis>-<random><.ext>`, safe for disk and URLs."""
    ext = file_extension(secure_filename(original_name) or "")
    suffix = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"
    return f"{prefix}-{suffix}.{ext}" if ext else f"{prefix}-{suffix}"


def classify_upload(extension, size):
    """(fileType, estimatedTimeMinutes) for an uploaded file."""
    if extension in VIDEO_EXTENSIONS:
        # length is unknown without decoding, instructors adjust it later
        return "video", 30
    if extension in IMAGE_EXTENSIONS:
        return "image", 2
    # roughly 10 pages per MB, 2 minutes per page
    return "document", math.ceil((size / (1024 * 1024)) * 10 * 2)


class LocalStorage:
    """Files under UPLOAD_FOLDER/<folder>, served by the uploads blueprint."""

    def __init__(self, root):
        self.root = root

    def _path(self, filename, folder):
        return os.path.join(self.root, folder, secure_filename(filename))

    def save(self, file, filename, folder="resources"):
        directory = os.path.join(self.root, folder)
        os.makedirs(directory, exist_ok=True)
        file.save(self._path(filename, folder))
        return f"/uploads/{folder}/{filename}"

    def exists(self, filename, folder="resources"):
        return os.path.isfile(self._path(filename, folder))

    def delete(self, filename, folder="resources"):
        path = self._path(filename, folder)
        if not os.path.isfile(path):
            return False
        os.remove(path)
        return True

    def directory(self, folder="resources"):
        return os.path.join(self.root, folder)


class DropboxStorage:
    """Files in a Dropbox app folder, shared through raw links."""

    def __init__(self, app_key, app_secret, refresh_token, root="/LearnMap"):
        if not all([app_key, app_secret, refresh_token]):
            raise ValueError("Missing Dropbox credentials! Set DROPBOX_APP_KEY, DROPBOX_APP_SECRET, and DROPBOX_REFRESH_TOKEN.")
        self.root = root.rstrip("/")
        self.dbx = dropbox.Dropbox(
            oauth2_refresh_token=refresh_token,
            app_key=app_key,
            app_secret=app_secret,
        )

    def _path(self, filename, folder):
        return f"{self.root}/{folder}/{secure_filename(filename)}"

    def save(self, file, filename, folder="resources"):
        dropbox_path = self._path(filename, folder)
        self.dbx.files_upload(file.read(), dropbox_path, mode=dropbox.files.WriteMode("overwrite"))

        shared_link = None
        try:
            existing_links = self.dbx.sharing_list_shared_links(path=dropbox_path).links
            if existing_links:
                shared_link = existing_links[0]
        except ApiError as e:
            logger.warning("Could not list shared links for %s: %s", dropbox_path, e)

        if not shared_link:
            shared_link = self.dbx.sharing_create_shared_link_with_settings(dropbox_path)

        return shared_link.url.replace("?dl=0", "?raw=1")

    def exists(self, filename, folder="resources"):
        try:
            self.dbx.files_get_metadata(self._path(filename, folder))
            return True
        except ApiError:
            return False

    def delete(self, filename, folder="resources"):
        try:
            self.dbx.files_delete_v2(self._path(filename, folder))
        except ApiError as e:
            logger.warning("Dropbox delete failed for %s: %s", filename, e)
            return False
        logger.info("File deleted from Dropbox: %s", filename)
        return True

    def directory(self, folder="resources"):
        return None


def init_storage(app):
    backend = app.config.get("STORAGE_BACKEND", "local")
    if backend == "dropbox":
        storage = DropboxStorage(
            app.config.get("DROPBOX_APP_KEY"),
            app.config.get("DROPBOX_APP_SECRET"),
            app.config.get("DROPBOX_REFRESH_TOKEN"),
            app.config.get("DROPBOX_ROOT", "/LearnMap"),
        )
    elif backend == "local":
        storage = LocalStorage(app.config["UPLOAD_FOLDER"])
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")

    app.extensions["storage"] = storage
    return storage


def get_storage():
    return current_app.extensions["storage"]
