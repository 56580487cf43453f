"""
流水线执行器 - 按计划驱动扫描后端

职责：
1. 按计划顺序执行各阶段
2. Acquire 执行一次，PerImageAdjust 对每张图像执行一次（参数一致）
3. 任意阶段失败即放弃本任务剩余阶段，记录日志并返回（不重试）
4. 成功后通知桌面聚焦

测试要点：
- test_execute_jpg_plan: 直接输出
- test_execute_pdf_plan: 暂存+合并
- test_adjust_failure_aborts_job: 第二张失败后中止
- test_surface_only_on_success: 仅成功时聚焦
"""

from __future__ import annotations

import logging
import tempfile
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from ..interfaces import ExecutionError, IDesktopFocus, IScanBackend
from ..models import (
    TIMESTAMP_FORMAT,
    AcquireParams,
    AdjustParams,
    AggregateParams,
    Job,
    OutputRoute,
    Plan,
    Stage,
    StageKind,
)

logger = logging.getLogger(__name__)


class PipelineExecutor:
    """流水线执行器"""

    def __init__(
        self,
        output_dir: Path,
        desktop: IDesktopFocus | None = None,
        staging_prefix: str = "scan-control-",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.output_dir = Path(output_dir)
        self.desktop = desktop
        self.staging_prefix = staging_prefix
        self.clock = clock

    def execute(self, plan: Plan, backend: IScanBackend) -> Job:
        """执行计划；任务级失败不抛出，体现在返回的 Job 状态中"""
        job = Job(
            job_id=str(uuid.uuid4()),
            timestamp=self.clock().strftime(TIMESTAMP_FORMAT),
        )
        job.mark_running()

        with tempfile.TemporaryDirectory(prefix=self.staging_prefix) as tmpdir:
            context: dict[str, Any] = {
                "staging_dir": Path(tmpdir),
                "raw_images": [],
                "adjusted": [],
            }
            try:
                self.output_dir.mkdir(parents=True, exist_ok=True)
                for stage in plan.stages:
                    self._execute_stage(job, stage, backend, context)
            except ExecutionError as e:
                logger.error("[%s] 任务失败 %s: %s", job.job_id, job.progress.stage, e)
                job.mark_failed(str(e), stage=e.stage or job.progress.stage)
                return job
            except OSError as e:
                logger.error("[%s] 输出目录不可用 %s: %s", job.job_id, self.output_dir, e)
                job.mark_failed(str(e))
                return job

        job.mark_succeeded()
        logger.info(
            "[%s] 任务完成: 采集 %d 张, 输出 %d 个文件",
            job.job_id, len(job.captured), len(job.outputs),
        )

        if self.desktop is not None:
            self.desktop.surface(self.output_dir)

        return job

    def _execute_stage(
        self, job: Job, stage: Stage, backend: IScanBackend, context: dict[str, Any]
    ) -> None:
        """执行单个阶段"""
        job.progress.stage = stage.kind.value
        logger.info("[%s] 开始阶段: %s", job.job_id, stage.describe())

        try:
            if stage.kind == StageKind.ACQUIRE:
                self._stage_acquire(job, stage.params, backend, context)

            elif stage.kind == StageKind.PER_IMAGE_ADJUST:
                self._stage_adjust(job, stage.params, backend, context)

            elif stage.kind == StageKind.AGGREGATE:
                self._stage_aggregate(job, stage.params, backend, context)

        except ExecutionError as e:
            if e.stage is None:
                e.stage = stage.kind.value
            raise

    def _stage_acquire(
        self,
        job: Job,
        params: AcquireParams,
        backend: IScanBackend,
        context: dict[str, Any],
    ) -> None:
        """采集"""
        logger.info("[%s] 扫描中", job.job_id)
        images = backend.acquire(params, context["staging_dir"], job.timestamp)
        context["raw_images"] = list(images)
        job.captured = list(images)
        job.progress.images_total = len(images)
        logger.info("[%s] 采集到 %d 张图像", job.job_id, len(images))

    def _stage_adjust(
        self,
        job: Job,
        params: AdjustParams,
        backend: IScanBackend,
        context: dict[str, Any],
    ) -> None:
        """单页调整"""
        logger.info("[%s] 调整图像", job.job_id)
        staging_dir: Path = context["staging_dir"]
        total = len(context["raw_images"])

        for i, raw in enumerate(context["raw_images"]):
            logger.debug("[%s] 调整 (%d/%d): %s", job.job_id, i + 1, total, raw.name)
            adjusted = backend.adjust(raw, params, staging_dir)
            if params.output == OutputRoute.OUTPUT_DIR:
                adjusted = backend.route_output(adjusted, self.output_dir)
                job.outputs.append(adjusted)
            context["adjusted"].append(adjusted)
            job.progress.images_done = i + 1

    def _stage_aggregate(
        self,
        job: Job,
        params: AggregateParams,
        backend: IScanBackend,
        context: dict[str, Any],
    ) -> None:
        """合并为多页文档"""
        if not context["adjusted"]:
            logger.warning("[%s] 无图像可合并，跳过", job.job_id)
            return

        logger.info("[%s] 合并为 %s", job.job_id, params.document_format)
        destination = self.output_dir / f"{job.timestamp}.{params.document_format}"
        document = backend.aggregate(list(context["adjusted"]), destination, params)
        job.outputs.append(document)
