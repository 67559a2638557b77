"""Core image plumbing and statistics."""

from .channels import split_channels, split_raw_channels, scored_planes, channel_count
from .statistics import AGGDParams, estimate_aggd

__all__ = [
    'split_channels', 'split_raw_channels', 'scored_planes', 'channel_count',
    'AGGDParams', 'estimate_aggd',
]
