from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional
from pathlib import Path


@dataclass
class DataConfig:
    path: str
    name: str
    # 'wide', 'long' or 'onehot'
    layout: str = "wide"
    id_col: Optional[str] = None
    item_col: Optional[str] = None
    sep: str = ","

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'name': self.name,
            'layout': self.layout,
            'id_col': self.id_col,
            'item_col': self.item_col,
            'sep': self.sep
        }


@dataclass
class MiningConfig:
    # 'apriori', 'fpgrowth', 'mlxtend_apriori', 'mlxtend_fpgrowth'
    algorithm: str = 'fpgrowth'
    min_support: float = 0.1
    min_confidence: float = 0.5

    def to_dict(self) -> Dict[str, Any]:
        return {
            'algorithm': self.algorithm,
            'min_support': self.min_support,
            'min_confidence': self.min_confidence
        }


@dataclass
class FilterConfig:
    metric: str
    threshold: float

    def to_dict(self) -> Dict[str, Any]:
        return {'metric': self.metric, 'threshold': self.threshold}


@dataclass
class AnalysisConfig:
    name: str
    mining: MiningConfig = field(default_factory=MiningConfig)
    data: Optional[DataConfig] = None
    filters: List[FilterConfig] = field(default_factory=list)
    output_dir: str = "./out"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'mining': self.mining.to_dict(),
            'data': self.data.to_dict() if self.data else None,
            'filters': [f.to_dict() for f in self.filters],
            'output_dir': self.output_dir
        }

    def get_output_path(self, suffix: str = "") -> Path:
        path = Path(self.output_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path / f"{self.name}{suffix}" if suffix else path
