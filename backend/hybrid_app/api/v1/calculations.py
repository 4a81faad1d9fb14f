import logging

from fastapi import APIRouter, HTTPException, Request, status
from starlette.concurrency import run_in_threadpool

from hybrid_app.core.rate_limit import calculation_limiter
from hybrid_app.core.run_gate import RunInProgressError, run_gate
from hybrid_app.schemas.calculation import (
    CalculationRequest,
    CalculationTaskResponse,
    TaskStatusResponse,
)
from hybrid_engine.config import SystemConfig
from hybrid_engine.simulation.runner import (
    CalculationError,
    InvalidInputError,
    run_calculation,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def build_config(body: CalculationRequest) -> SystemConfig:
    """Convert a request body, mapping engine validation errors to 422."""
    try:
        return body.to_config()
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )


@router.post(
    "",
    summary="Run calculation",
    description=(
        "Size the hybrid system and evaluate it against a diesel-only baseline. "
        "Only one calculation runs at a time; a request while busy returns 409."
    ),
)
async def create_calculation(body: CalculationRequest, request: Request) -> dict:
    calculation_limiter.check(request)
    config = build_config(body)

    try:
        with run_gate.acquire():
            results = await run_in_threadpool(run_calculation, config)
            # Serialise first: a result that cannot be rendered must not
            # replace the stored one.
            payload = results.to_dict()
            run_gate.store(results)
    except RunInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except (InvalidInputError, CalculationError) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )

    return payload


@router.get(
    "/latest",
    summary="Latest successful calculation",
)
async def get_latest_calculation() -> dict:
    results = run_gate.latest
    if results is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No calculation has completed yet",
        )
    return results.to_dict()


@router.post(
    "/async",
    response_model=CalculationTaskResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Queue calculation",
    description="Queue a calculation on the Celery worker. Returns a task ID for polling.",
)
async def create_calculation_async(
    body: CalculationRequest, request: Request
) -> CalculationTaskResponse:
    calculation_limiter.check(request)
    build_config(body)

    from hybrid_app.worker.tasks import run_calculation as calculation_task

    task = calculation_task.delay(body.model_dump())
    return CalculationTaskResponse(task_id=task.id, status="queued")


@router.get(
    "/tasks/{task_id}",
    response_model=TaskStatusResponse,
    summary="Background calculation status",
)
async def get_task_status(task_id: str) -> TaskStatusResponse:
    from hybrid_app.worker import celery_app

    res = celery_app.AsyncResult(task_id)
    state = res.state

    if state == "PENDING":
        return TaskStatusResponse(task_id=task_id, status="pending")
    if state in ("STARTED", "PROGRESS", "RETRY"):
        return TaskStatusResponse(task_id=task_id, status="started")
    if state == "SUCCESS":
        payload = res.result or {}
        if payload.get("status") == "failed":
            return TaskStatusResponse(
                task_id=task_id, status="failure", error=payload.get("error")
            )
        return TaskStatusResponse(
            task_id=task_id, status="success", result=payload.get("result")
        )

    logger.warning("Calculation task %s ended in state %s", task_id, state)
    return TaskStatusResponse(
        task_id=task_id, status="failure", error=str(res.result)[:500]
    )
