from .fcr_utils import reconcile, safe_ratio, whole_window_summary

__all__ = ['reconcile', 'safe_ratio', 'whole_window_summary']
