from celery.schedules import crontab

beat_schedule = {
    # Check price alerts every 5 minutes, Mon-Fri
    "evaluate_price_alerts": {
        "task": "alerts.evaluate_price_alerts",
        "schedule": crontab(minute="*/5", day_of_week="mon-fri"),
        "args": (),
    },
}
