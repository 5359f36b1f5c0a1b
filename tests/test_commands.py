from models.users import User


def test_create_admin(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-admin", "root", "root@example.com", "--password", "secret123"])

    assert result.exit_code == 0
    admin = User.query.filter_by(username="root").one()
    assert admin.role == "admin"
    assert admin.check_password("secret123")


def test_create_admin_rejects_duplicates(app, learner):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-admin", "learner", "other@example.com", "--password", "secret123"])

    assert result.exit_code != 0
    assert "already exists" in result.output


def test_set_password(app, learner):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["set-password", "learner", "--password", "changed99"])

    assert result.exit_code == 0
    assert User.query.filter_by(username="learner").one().check_password("changed99")


def test_set_password_unknown_user(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["set-password", "ghost", "--password", "changed99"])

    assert result.exit_code != 0
    assert "User not found!" in result.output
