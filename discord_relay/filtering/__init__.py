from .membership_filter import SkipCounter, is_allowed, rejection_reason
