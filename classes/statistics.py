def completion_stats(records, total_resources=None):
    """
    Roll progress rows up into path statistics.

    `records` may contain None for resources the user never touched; those
    count as not started with no time spent. `total_resources` defaults to the
    number of records.

    overallCompletionPercentage is completed / total * 100: a resource only
    counts once it is completed, partial percentages add nothing.
    """
    records = list(records)
    total = len(records) if total_resources is None else total_resources
    touched = [record for record in records if record is not None]

    completed = sum(1 for record in touched if record.status == "completed")
    in_progress = sum(1 for record in touched if record.status == "in_progress")
    time_spent = sum(record.time_spent_minutes or 0 for record in touched)
    percentage = (completed / total) * 100 if total > 0 else 0.0

    return {
        "totalResources": total,
        "completedResources": completed,
        "inProgressResources": in_progress,
        "totalTimeSpent": time_spent,
        "overallCompletionPercentage": percentage,
    }


def classify_path(stats):
    pct = stats["overallCompletionPercentage"]
    if pct == 100:
        return "completed"
    if 0 < pct < 100:
        return "in_progress"
    return "not_started"


def dashboard_summary(path_stats):
    """Totals across the per-path stats of one user."""
    classes = [classify_path(stats) for stats in path_stats]
    return {
        "totalPaths": len(path_stats),
        "completedPaths": classes.count("completed"),
        "inProgressPaths": classes.count("in_progress"),
        "totalTimeSpent": sum(stats["totalTimeSpent"] for stats in path_stats),
    }
