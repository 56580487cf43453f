"""
任务模型 - 一次按钮触发的扫描任务状态与生命周期
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

TIMESTAMP_FORMAT = "%Y_%m_%d_%H_%M_%S"


class JobStatus(str, Enum):
    """任务状态枚举"""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class JobProgress(BaseModel):
    """任务进度"""
    stage: str = "INIT"
    images_total: int = 0
    images_done: int = 0


class Job(BaseModel):
    """任务实体"""
    job_id: str = Field(..., description="UUID")
    timestamp: str = Field(..., description="采集时间戳，用于输出命名")

    # 状态
    status: JobStatus = JobStatus.QUEUED
    progress: JobProgress = Field(default_factory=JobProgress)

    # 产物
    captured: list[Path] = Field(default_factory=list, description="原始采集图像")
    outputs: list[Path] = Field(default_factory=list, description="持久输出文件")

    # 结果
    errors: list[str] = Field(default_factory=list, description="错误信息")
    failed_stage: str | None = None

    # 时间戳
    created_at: datetime = Field(default_factory=datetime.now)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == JobStatus.SUCCEEDED

    def mark_running(self, stage: str = "Acquire") -> None:
        """标记为运行中"""
        self.status = JobStatus.RUNNING
        self.started_at = datetime.now()
        self.progress.stage = stage

    def mark_succeeded(self) -> None:
        """标记为成功"""
        self.status = JobStatus.SUCCEEDED
        self.finished_at = datetime.now()

    def mark_failed(self, error: str, stage: str | None = None) -> None:
        """标记为失败"""
        self.status = JobStatus.FAILED
        self.finished_at = datetime.now()
        self.failed_stage = stage or self.progress.stage
        self.errors.append(error)
