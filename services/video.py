# services/video.py
"""AI summary videos: script templating, the Tavus job and the function
behind ``POST /functions/v1/generate-video``."""
import logging
import math
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from errors import CollabError, VideoGenerationError
from models.ids import as_utc, utcnow
from models.snapshot import ProjectSnapshot
from utils.normalize import project_from_rows
from utils.progress import project_progress
from services.http import FunctionResponse
from utils.sample_data import sample_project

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 10
MAX_POLL_ATTEMPTS = 30  # five minutes at the default interval
ESTIMATED_DURATION_SECONDS = 180


class VideoState(str, Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


TERMINAL_STATES = {VideoState.COMPLETED, VideoState.FAILED, VideoState.TIMED_OUT, VideoState.CANCELLED}


@dataclass
class VideoOptions:
    include_timeline: bool = True
    include_feedback: bool = True
    include_contributions: bool = True


# ---- script ----

def _assessment(progress: int) -> str:
    if progress >= 70:
        return "The project shows excellent progress with strong team engagement and consistent delivery of milestones."
    if progress >= 40:
        return ("The project is making steady progress. There are opportunities to improve team engagement "
                "and accelerate task completion to meet project objectives.")
    return ("The project requires immediate attention to improve team engagement and task completion "
            "rates to meet project objectives.")


def build_video_script(project: ProjectSnapshot, options: Optional[VideoOptions] = None, now=None) -> str:
    """Narration for the avatar, filled in from the project's figures."""
    options = options or VideoOptions()
    now = as_utc(now) if now else utcnow()
    completed = project.tasks_with_status("completed")
    in_progress = project.tasks_with_status("in-progress")
    todo = project.tasks_with_status("todo")
    progress = project_progress(project.tasks)
    total_hours = sum(t.hours_logged for t in project.tasks)
    created = as_utc(project.created_at)
    duration_days = math.ceil((now - created).total_seconds() / 86400)
    phase_index = project.phases.index(project.current_phase) + 1 if project.current_phase in project.phases else 0

    parts = [
        f'Hello! I\'m here to present a comprehensive summary of the project "{project.title}".',
        f"This collaborative project involved {len(project.members)} dedicated team members working "
        f"together over the past {duration_days} days.",
        "Let me walk you through the key highlights:",
        f"Project Overview:\n{project.description}",
        f"Current Status:\nWe're currently in the {project.current_phase} phase, with an overall progress "
        f"of {progress} percent complete. The team has successfully completed {len(completed)} out of "
        f"{len(project.tasks)} tasks, logging a total of {total_hours:g} hours of dedicated work.",
    ]
    if options.include_contributions and project.members:
        lines = [
            f"{m.name}, our {m.role}, has contributed {m.contribution_percentage:g} percent to the project, "
            f"completing {m.tasks_completed} tasks and logging {m.hours_logged:g} hours of work."
            for m in project.members
        ]
        parts.append("Team Performance Analysis:\n" + "\n".join(lines))
    if options.include_timeline:
        parts.append(
            f"Key Achievements:\nThe team has successfully progressed through {phase_index} of "
            f"{len(project.phases)} planned project phases."
        )
    if options.include_feedback:
        parts.append(_assessment(progress))

    distribution = []
    if completed:
        distribution.append("Completed tasks include: " + ", ".join(t.title for t in completed) + ".")
    else:
        distribution.append("No tasks have been completed yet.")
    if in_progress:
        distribution.append("Currently in progress: " + ", ".join(t.title for t in in_progress) + ".")
    if todo:
        distribution.append("Upcoming tasks: " + ", ".join(t.title for t in todo) + ".")
    parts.append("Task Distribution Analysis:\n" + "\n".join(distribution))

    outlook = "well-positioned" if progress >= 70 else "working diligently"
    parts.append(f"Looking ahead, the team is {outlook} to complete the remaining phases and deliver "
                 f"a successful project outcome.")
    parts.append("Thank you for your attention to this project summary.")
    return "\n\n".join(parts)


# ---- job ----

@dataclass
class VideoJob:
    """One Tavus render: submitted -> polling -> completed | failed | timed_out.

    ``cancel_event`` is checked between polls; setting it ends the job as
    cancelled at the next wake-up.
    """
    client: object
    poll_interval: float = POLL_INTERVAL_SECONDS
    max_attempts: int = MAX_POLL_ATTEMPTS
    cancel_event: threading.Event = field(default_factory=threading.Event)
    state: Optional[VideoState] = None
    video_id: Optional[str] = None
    video_url: Optional[str] = None
    attempts: int = 0
    error: Optional[str] = None

    def _finish(self, state: VideoState, error: Optional[str] = None) -> VideoState:
        self.state = state
        self.error = error
        if error:
            logger.error("Video %s ended %s: %s", self.video_id, state.value, error)
        return state

    def submit(self, script: str, project: ProjectSnapshot) -> VideoState:
        result = self.client.create_video(
            script,
            video_name=f"{project.title} - Project Summary",
            properties={
                "project_title": project.title,
                "team_size": str(len(project.members)),
                "progress_percentage": str(project_progress(project.tasks)),
                "current_phase": project.current_phase,
            },
        )
        if not result.success:
            return self._finish(VideoState.FAILED, result.error)
        self.video_id = (result.data or {}).get("video_id")
        if not self.video_id:
            return self._finish(VideoState.FAILED, "No video ID returned from Tavus API")
        logger.info("Tavus video %s submitted", self.video_id)
        self.state = VideoState.SUBMITTED
        return self.state

    def poll_once(self) -> VideoState:
        self.attempts += 1
        result = self.client.get_video_status(self.video_id)
        if result.success:
            status = result.data.get("status")
            logger.info("Video %s status: %s (poll %d)", self.video_id, status, self.attempts)
            if status == "completed" and result.data.get("download_url"):
                self.video_url = result.data["download_url"]
                return self._finish(VideoState.COMPLETED)
            if status == "failed":
                return self._finish(VideoState.FAILED, "Video generation failed on Tavus side")
        if self.attempts >= self.max_attempts:
            return self._finish(VideoState.TIMED_OUT, "Video generation timed out - please try again later")
        self.state = VideoState.POLLING
        return self.state

    def wait(self) -> VideoState:
        while self.state not in TERMINAL_STATES:
            # Event.wait doubles as the sleep and the cancellation check
            if self.cancel_event.wait(self.poll_interval):
                return self._finish(VideoState.CANCELLED, "Video generation cancelled")
            self.poll_once()
        return self.state

    def run(self, script: str, project: ProjectSnapshot) -> str:
        """Submit and poll to the end; returns the download URL."""
        if self.submit(script, project) is VideoState.SUBMITTED:
            self.wait()
        if self.state is not VideoState.COMPLETED:
            raise VideoGenerationError(self.error or "Video generation failed", state=self.state)
        return self.video_url


# ---- serverless function ----

class VideoRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_id: Optional[str] = Field(default=None, alias="projectId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    include_timeline: bool = Field(default=True, alias="includeTimeline")
    include_feedback: bool = Field(default=True, alias="includeFeedback")
    include_contributions: bool = Field(default=True, alias="includeContributions")

    def options(self) -> VideoOptions:
        return VideoOptions(self.include_timeline, self.include_feedback, self.include_contributions)


def load_project_snapshot(store, project_id: str) -> Optional[ProjectSnapshot]:
    """Project as the video function sees it; None when it does not exist.
    A store failure yields the sample project under the requested id."""
    try:
        row = store.get_project(project_id)
        if row is None:
            logger.info("Project %s not found", project_id)
            return None
        record = project_from_rows(row, store.members_for(project_id), store.tasks_for(project_id))
    except CollabError:
        logger.exception("Error fetching project %s, falling back to sample data", project_id)
        record = sample_project(owner_id="", project_id=project_id)
    return ProjectSnapshot.from_record(record)


def generate_summary_video(request: VideoRequest, *, store, client,
                           cancel_event: Optional[threading.Event] = None,
                           poll_interval: Optional[float] = None,
                           max_attempts: Optional[int] = None) -> FunctionResponse:
    if not request.project_id:
        return FunctionResponse(400, {"error": "Project ID is required"})
    logger.info("Starting video generation for project: %s", request.project_id)

    try:
        project = load_project_snapshot(store, request.project_id)
    except ValidationError as e:
        logger.error("Project %s failed validation: %s", request.project_id, e)
        return FunctionResponse(500, {"success": False, "error": "Invalid project data", "details": str(e)})
    if project is None:
        return FunctionResponse(404, {"error": "Project not found"})

    script = build_video_script(project, request.options())
    logger.info("Generated script with %d characters", len(script))

    job = VideoJob(client,
                   poll_interval=POLL_INTERVAL_SECONDS if poll_interval is None else poll_interval,
                   max_attempts=max_attempts or MAX_POLL_ATTEMPTS,
                   cancel_event=cancel_event or threading.Event())
    try:
        video_url = job.run(script, project)
    except CollabError as e:
        return FunctionResponse(500, {"success": False, "error": "Video generation failed", "details": str(e)})

    try:
        record = store.insert_video({
            "project_id": request.project_id,
            "user_id": request.user_id,
            "video_url": video_url,
            "script": script,
            "generation_status": VideoState.COMPLETED.value,
        })
    except CollabError as e:
        logger.error("Database error: %s", e)
        return FunctionResponse(500, {"success": False, "error": "Failed to save video record"})

    return FunctionResponse(200, {
        "success": True,
        "videoUrl": video_url,
        "videoId": record["id"],
        "script": script,
        "duration": ESTIMATED_DURATION_SECONDS,
    })


def list_videos(store, project_id: str) -> Dict:
    try:
        return {"success": True, "videos": store.videos_for(project_id)}
    except CollabError as e:
        logger.error("Error fetching generated videos: %s", e)
        return {"success": False, "error": str(e)}


def delete_video(store, video_id: str) -> Dict:
    try:
        store.delete_video(video_id)
        return {"success": True}
    except CollabError as e:
        logger.error("Error deleting video: %s", e)
        return {"success": False, "error": str(e)}
