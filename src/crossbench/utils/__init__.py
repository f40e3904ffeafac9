from .config import DEFAULT_CONFIG, load_config
from .console import format_duration, progress_bar
from .cpu import CPUSampler, default_worker_count
from .stats import StatisticsCollector
from .timer import HighPrecisionTimer

__all__ = [
    'DEFAULT_CONFIG',
    'load_config',
    'format_duration',
    'progress_bar',
    'CPUSampler',
    'default_worker_count',
    'StatisticsCollector',
    'HighPrecisionTimer',
]
