"""
流水线模块 - 计划生成与执行

子模块：
- stages: 幅面查找表与分辨率规则
- planner: Settings → Plan
- executor: 按计划驱动扫描后端
"""

from .executor import PipelineExecutor
from .planner import PipelinePlanner
from .stages import GEOMETRY_TABLE

__all__ = [
    "PipelinePlanner",
    "PipelineExecutor",
    "GEOMETRY_TABLE",
]
