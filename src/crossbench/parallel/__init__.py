from .executor import ExecutionResult, WorkerPoolExecutor
from .partitioner import Partition, bind_partitions, partition

__all__ = [
    'ExecutionResult',
    'WorkerPoolExecutor',
    'Partition',
    'bind_partitions',
    'partition',
]
