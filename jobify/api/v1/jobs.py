# jobify/api/v1/jobs.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from jobify.api.v1.auth import get_current_user, require_role
from jobify.api.v1.schemas import JOB_EDITABLE_FIELDS, JobCreate, JobUpdate, dump_job
from jobify.core.errors import describe_errors
from jobify.core.permissions import ensure_owner
from jobify.db.documents import Job, User, as_object_id, utcnow
from jobify.services import lifecycle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/job", tags=["jobs"])


async def _get_job_or_404(job_id: str) -> Job:
    oid = as_object_id(job_id)
    job = await Job.get(oid) if oid else None
    if not job:
        raise HTTPException(status_code=404, detail="Job not found.")
    return job


@router.post("/post", status_code=201)
async def post_job(payload: JobCreate, current_user: User = Depends(require_role("job:create"))):
    lifecycle.validate_salary_range(payload.salary_from, payload.salary_to)

    fields = payload.model_dump(exclude_none=True)
    job = Job(**fields, posted_by=current_user.id)
    lifecycle.refresh_expired(job)
    await job.insert()

    logger.info("Employer %s posted job %s", current_user.id, job.id)
    return {"success": True, "message": "Job Posted Successfully", "job": dump_job(job)}


@router.get("/getall")
async def get_all_jobs(page: Optional[str] = Query(None), limit: Optional[str] = Query(None)):
    page, limit, skip = lifecycle.page_window(page, limit)

    total = await Job.find_all().count()
    jobs = await Job.find_all().sort(-Job.posted_on).skip(skip).limit(limit).to_list()

    now = utcnow()
    return {
        "success": True,
        "currentPage": page,
        "totalPages": lifecycle.total_pages(total, limit),
        "totalJobs": total,
        "jobs": [dump_job(j, now) for j in jobs],
    }


@router.get("/getmyjobs")
async def get_my_jobs(current_user: User = Depends(require_role("job:list-own"))):
    jobs = await Job.find(Job.posted_by == current_user.id).sort(-Job.posted_on).to_list()
    now = utcnow()
    return {"success": True, "myJobs": [dump_job(j, now) for j in jobs]}


@router.get("/{job_id}")
async def get_single_job(job_id: str, current_user: User = Depends(get_current_user)):
    job = await _get_job_or_404(job_id)
    return {"success": True, "job": dump_job(job)}


@router.patch("/update/{job_id}")
async def update_job(job_id: str, payload: JobUpdate, current_user: User = Depends(require_role("job:update"))):
    job = await _get_job_or_404(job_id)
    ensure_owner(current_user, job.posted_by)

    # merge the patch into the stored fields and validate the whole thing again
    current = {name: getattr(job, name) for name in JOB_EDITABLE_FIELDS}
    merged_input = {**current, **payload.model_dump(exclude_unset=True)}
    try:
        merged = JobCreate.model_validate(merged_input)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=describe_errors(exc.errors()))
    lifecycle.validate_salary_range(merged.salary_from, merged.salary_to)

    for name in JOB_EDITABLE_FIELDS:
        value = getattr(merged, name)
        if name == "posted_on" and value is None:
            continue
        setattr(job, name, value)
    lifecycle.refresh_expired(job)
    await job.save()

    logger.info("Job %s updated by %s", job.id, current_user.id)
    return {"success": True, "message": "Job Updated!", "job": dump_job(job)}


@router.delete("/delete/{job_id}")
async def delete_job(job_id: str, current_user: User = Depends(require_role("job:delete"))):
    job = await _get_job_or_404(job_id)
    ensure_owner(current_user, job.posted_by)

    await job.delete()
    logger.info("Job %s deleted by %s", job_id, current_user.id)
    return {"success": True, "message": "Job Deleted!"}
