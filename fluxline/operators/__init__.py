"""
Query operators (Volcano model)
"""

from fluxline.operators.base import Operator
from fluxline.operators.bucket import TimeBucketAggregate, bucket_start
from fluxline.operators.project import Project
from fluxline.operators.scan import Scan

__all__ = ["Operator", "Project", "Scan", "TimeBucketAggregate", "bucket_start"]
