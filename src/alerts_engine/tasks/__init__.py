from .evaluate_alerts import evaluate_price_alerts, run_price_alert_evaluation

__all__ = ["evaluate_price_alerts", "run_price_alert_evaluation"]
