from .config import (
    DataConfig,
    MiningConfig,
    FilterConfig,
    AnalysisConfig
)
from .base import (
    AnalysisResult,
    load_data,
    create_miner,
    apply_filters,
    build_summary,
    run_analysis
)

__all__ = [
    'DataConfig',
    'MiningConfig',
    'FilterConfig',
    'AnalysisConfig',
    'AnalysisResult',
    'load_data',
    'create_miner',
    'apply_filters',
    'build_summary',
    'run_analysis'
]
