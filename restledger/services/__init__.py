from .report_feed import FeedConfig, FeedState, PageResult, ReportFeed

__all__ = ["FeedConfig", "FeedState", "PageResult", "ReportFeed"]
