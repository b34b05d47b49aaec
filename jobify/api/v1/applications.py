# jobify/api/v1/applications.py
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from jobify.api.v1.auth import require_role
from jobify.api.v1.schemas import ApplicationIn, dump_application, normalize_email
from jobify.core.permissions import ensure_owner
from jobify.db.documents import Application, Job, ResumeRef, User, as_object_id
from jobify.services import lifecycle
from jobify.services.mailer import Mailer, get_mailer, send_application_confirmation
from jobify.services.storage import ResumeStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/application", tags=["applications"])


@router.post("/post", status_code=201)
async def post_application(
    payload: ApplicationIn,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_role("application:create")),
    mailer: Mailer = Depends(get_mailer),
    storage: ResumeStorage = Depends(get_storage),
):
    if payload.missing_fields():
        raise HTTPException(status_code=400, detail="Please fill all required fields.")
    email = normalize_email(payload.email)

    # the resume always comes from the profile; nothing is uploaded here
    profile_resume = current_user.resume
    if not profile_resume or not profile_resume.url:
        raise HTTPException(status_code=400, detail="Please upload your resume to your profile before applying.")

    job_oid = as_object_id(payload.job_id)
    job = await Job.get(job_oid) if job_oid else None
    if not job:
        raise HTTPException(status_code=404, detail="Job not found.")
    lifecycle.check_can_apply(job)

    application = Application(
        name=payload.name.strip(),
        email=email,
        cover_letter=payload.cover_letter,
        phone=payload.phone,
        address=payload.address,
        applicant_id=current_user.id,
        employer_id=job.posted_by,
        job_id=job.id,
        # snapshot: later profile uploads do not touch this application
        resume=ResumeRef(public_id=profile_resume.public_id, url=profile_resume.url),
    )
    await application.insert()
    logger.info("Application %s submitted by %s for job %s", application.id, current_user.id, job.id)

    background_tasks.add_task(
        send_application_confirmation, mailer, application.email, application.name, job.title, job.company
    )

    return {
        "success": True,
        "message": "Application submitted successfully.",
        "application": dump_application(application, storage),
    }


@router.get("/jobseeker/getall")
async def jobseeker_get_all_applications(
    current_user: User = Depends(require_role("application:list-own")),
    storage: ResumeStorage = Depends(get_storage),
):
    applications = (
        await Application.find(Application.applicant_id == current_user.id).sort(-Application.created_at).to_list()
    )
    return {"success": True, "applications": [dump_application(a, storage) for a in applications]}


@router.delete("/delete/{application_id}")
async def jobseeker_delete_application(
    application_id: str, current_user: User = Depends(require_role("application:delete"))
):
    oid = as_object_id(application_id)
    application = await Application.get(oid) if oid else None
    if not application:
        raise HTTPException(status_code=404, detail="Application not found!")
    ensure_owner(current_user, application.applicant_id)

    await application.delete()
    logger.info("Application %s withdrawn by %s", application_id, current_user.id)
    return {"success": True, "message": "Application deleted successfully."}
