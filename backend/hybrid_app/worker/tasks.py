import logging

from hybrid_app.core.logging import bind_task_id
from hybrid_app.schemas.calculation import CalculationRequest
from hybrid_app.worker import celery_app
from hybrid_engine.simulation.runner import run_calculation as run_pipeline

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="run_calculation")
def run_calculation(self, request_data: dict) -> dict:
    """Run the full sizing pipeline in the background.

    Invalid input and stage failures are reported in the returned payload
    rather than retried.
    """
    task_id = self.request.id
    with bind_task_id(task_id):
        logger.info("Calculation task started", extra={"task_id": task_id})
        try:
            config = CalculationRequest.model_validate(request_data).to_config()
            results = run_pipeline(
                config,
                progress_callback=lambda step, frac: _update_progress(self, step, frac),
            )
            payload = results.to_dict()
        except ValueError as e:
            # Also covers InvalidInputError and pydantic ValidationError.
            logger.info(
                "Calculation task rejected input: %s", e,
                extra={"task_id": task_id, "error": str(e)[:200]},
            )
            return {"status": "failed", "error": str(e)[:2000]}
        except RuntimeError as e:
            logger.warning(
                "Calculation task failed: %s", e,
                extra={
                    "task_id": task_id,
                    "stage": getattr(e, "stage", None),
                    "error": str(e)[:200],
                },
            )
            return {"status": "failed", "error": str(e)[:2000]}

        logger.info("Calculation task completed", extra={"task_id": task_id})
        return {"status": "completed", "result": payload}


def _update_progress(task, step: str, fraction: float) -> None:
    if not task.request.id:
        return
    task.update_state(state="PROGRESS", meta={"step": step, "progress": round(fraction * 100)})
