import logging
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .assemblers.base import RenderedDocument, ReportAssembler

logger = logging.getLogger(__name__)


@dataclass
class ReportJob:
    id: str
    assembler: ReportAssembler
    status: str = "submitted"
    document: Optional[RenderedDocument] = field(default=None, repr=False)
    result_path: Optional[str] = None
    error: Optional[str] = None
    future: Optional[Future] = field(default=None, repr=False)


class ReportQueue:
    """
    Threaded queue so several PDFs can be generated without blocking the caller.
    Every job owns its assembler, and each build creates its own document.
    """

    def __init__(self, max_workers: int = 2, output_dir: Optional[Path] = None):
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="report")
        self.output_dir = output_dir
        self.jobs: Dict[str, ReportJob] = {}
        self.lock = threading.Lock()

    def submit(self, assembler: ReportAssembler) -> str:
        job_id = uuid.uuid4().hex[:12]
        job = ReportJob(id=job_id, assembler=assembler, status="queued")
        with self.lock:
            self.jobs[job_id] = job
        job.future = self.executor.submit(self._run_job, job_id)
        return job_id

    def _run_job(self, job_id: str) -> None:
        with self.lock:
            job = self.jobs[job_id]
            job.status = "running"
        try:
            document = job.assembler.build()
            path = document.save(self.output_dir) if self.output_dir is not None else None
            with self.lock:
                job.document = document
                job.result_path = str(path) if path else None
                job.status = "completed"
        except Exception as exc:
            logger.warning("Report job %s (%s) failed: %s", job_id, job.assembler.kind, exc)
            with self.lock:
                job.status = "failed"
                job.error = str(exc)

    def get(self, job_id: str) -> Optional[ReportJob]:
        with self.lock:
            return self.jobs.get(job_id)

    def wait(self, job_id: str, timeout: Optional[float] = None) -> Optional[ReportJob]:
        job = self.get(job_id)
        if job is not None and job.future is not None:
            job.future.result(timeout=timeout)
        return job

    def shutdown(self, wait: bool = True) -> None:
        self.executor.shutdown(wait=wait)
