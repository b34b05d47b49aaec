# jobify/api/v1/uploads.py
"""
Profile resume upload.
- Accepts one multipart file (field `resume`), checks type/size server-side
- Stores it via ResumeStorage (S3/R2 or local disk)
- Points the user's profile at the new file, then removes the previous file

The old object is deleted only after the new reference is saved, so a failure
mid-way leaves at worst an orphaned file, never a profile without a resume.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from jobify.api.v1.auth import get_current_user
from jobify.api.v1.schemas import dump_user
from jobify.core.config import settings
from jobify.db.documents import User
from jobify.services.storage import ResumeStorage, StorageError, get_storage, validate_resume_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["users"])


@router.post("/upload-resume")
async def upload_resume(
    resume: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    storage: ResumeStorage = Depends(get_storage),
):
    if resume is None:
        raise HTTPException(status_code=400, detail="Please select a resume file to upload.")

    # read one byte past the limit so oversize files are detected without buffering them whole
    data = await resume.read(settings.RESUME_MAX_BYTES + 1)
    validate_resume_upload(resume.filename, len(data))

    previous = current_user.resume
    try:
        new_ref = await storage.save(data, resume.filename, resume.content_type)
    except StorageError:
        logger.exception("Resume upload failed for user %s", current_user.id)
        raise HTTPException(status_code=500, detail="Failed to upload resume. Please try again.")

    current_user.resume = new_ref
    try:
        await current_user.save()
    except Exception:
        # keep storage consistent with the profile we could not update
        await storage.delete(new_ref.public_id)
        raise

    if previous and previous.public_id != new_ref.public_id:
        if not await storage.delete(previous.public_id):
            logger.warning("Old resume %s for user %s could not be removed", previous.public_id, current_user.id)

    logger.info("User %s resume replaced with %s", current_user.id, new_ref.public_id)
    return {"success": True, "message": "Resume uploaded successfully.", "user": dump_user(current_user, storage)}
