import logging
from typing import List

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse, Response

from ..config import settings
from ..services.exceptions import (
    FieldNotRenderedError,
    FlowNotFoundError,
    InvalidFieldChangeError,
    SessionNotFoundError,
)
from ..services.flow_service import FlowService
from ..state.models import ValidationResult
from .dependencies import get_flow_service
from .schemas import (
    FieldAction,
    FieldChange,
    FlowSummary,
    NavigationRequest,
    SaveRequest,
    SaveResponse,
    SessionRead,
    StepView,
    ValidationRequest,
)

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title="Symptom Flows")


# --- Error Mapping ---

@app.exception_handler(FlowNotFoundError)
@app.exception_handler(SessionNotFoundError)
@app.exception_handler(FieldNotRenderedError)
async def not_found_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidFieldChangeError)
async def invalid_change_handler(request: Request, exc: InvalidFieldChangeError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"detail": str(exc)}
    )


def _session_read(service: FlowService, session_id: str) -> SessionRead:
    session = service.get_session(session_id)
    return SessionRead(
        session_id=session.session_id,
        flow_id=session.flow_id,
        # Render first: it may seed slots that the snapshot should include.
        step=StepView.from_rendered(session.renderer.render()),
        state=session.controller.snapshot(),
    )


# --- Endpoints ---

@app.get("/flows", response_model=List[FlowSummary])
def list_flows(service: FlowService = Depends(get_flow_service)):
    return [
        FlowSummary(id=flow.id, title=flow.title, total_steps=flow.total_steps)
        for flow in service.list_flows()
    ]


@app.post(
    "/flows/{flow_id}/sessions",
    response_model=SessionRead,
    status_code=status.HTTP_201_CREATED,
)
def create_session(flow_id: str, service: FlowService = Depends(get_flow_service)):
    """Starts a new flow instance."""
    session = service.create_session(flow_id)
    return _session_read(service, session.session_id)


@app.get("/sessions/{session_id}", response_model=SessionRead)
def get_session(session_id: str, service: FlowService = Depends(get_flow_service)):
    return _session_read(service, session_id)


@app.put("/sessions/{session_id}/fields/{field_id}", response_model=SessionRead)
def change_field(
    session_id: str,
    field_id: str,
    change: FieldChange,
    service: FlowService = Depends(get_flow_service),
):
    service.change_field(session_id, field_id, value=change.value)
    return _session_read(service, session_id)


@app.post(
    "/sessions/{session_id}/fields/{field_id}/actions/{action}",
    response_model=SessionRead,
)
def perform_field_action(
    session_id: str,
    field_id: str,
    action: str,
    body: FieldAction,
    service: FlowService = Depends(get_flow_service),
):
    service.change_field(session_id, field_id, action=action, args=body.args)
    return _session_read(service, session_id)


@app.post("/sessions/{session_id}/navigation", response_model=SessionRead)
def navigate(
    session_id: str,
    request: NavigationRequest,
    service: FlowService = Depends(get_flow_service),
):
    service.navigate(session_id, request.action, request.step)
    return _session_read(service, session_id)


@app.post("/sessions/{session_id}/validation", response_model=ValidationResult)
def validate(
    session_id: str,
    request: ValidationRequest,
    service: FlowService = Depends(get_flow_service),
):
    return service.validate(session_id, request.scope)


@app.post("/sessions/{session_id}/save", response_model=SaveResponse)
async def save(
    session_id: str,
    request: SaveRequest,
    service: FlowService = Depends(get_flow_service),
):
    outcome = await service.save(session_id, early=request.early)
    body = SaveResponse(status=outcome.status, validation=outcome.validation)
    if outcome.status == "invalid":
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=body.model_dump()
        )
    if outcome.status == "in_progress":
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=body.model_dump())
    return body


@app.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_session(session_id: str, service: FlowService = Depends(get_flow_service)):
    """Cancels the flow and discards its session."""
    service.cancel(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
