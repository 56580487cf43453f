"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- Settings: 单帧解码出的扫描设置
- Plan/Stage: 规划器输出的处理计划
- Job: 任务状态与生命周期
"""

from .job import TIMESTAMP_FORMAT, Job, JobProgress, JobStatus
from .plan import (
    AcquireParams,
    AdjustParams,
    AggregateParams,
    Geometry,
    OutputRoute,
    Plan,
    Stage,
    StageKind,
)
from .settings import PageSize, ScanMode, Settings

__all__ = [
    "Settings",
    "PageSize",
    "ScanMode",
    "Plan",
    "Stage",
    "StageKind",
    "OutputRoute",
    "Geometry",
    "AcquireParams",
    "AdjustParams",
    "AggregateParams",
    "Job",
    "JobStatus",
    "JobProgress",
    "TIMESTAMP_FORMAT",
]
