import uuid
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse

from storypoints.agent.graph import EstimatorServices
from storypoints.clients.llm_client import AIEstimationError
from storypoints.schemas.keyword_taxonomy import KeywordTaxonomy
from storypoints.schemas.predictions import AIEstimate, BertModelInfo, BertPrediction
from storypoints.schemas.score_breakdown import ScoreBreakdown
from storypoints.schemas.task import ModelStats, Task
from storypoints.services.bert_classifier import ModelLoadError
from storypoints.services.csv_processor import CSVImportError, csv_rows_to_tasks, generate_sample_csv, parse_csv
from storypoints.services.estimator import estimate, explain
from storypoints.services.feature_extractor import extract_features
from storypoints.services.readability_metrics import (
    calculate_readability_metrics,
    interpret_flesch_kincaid_grade,
    interpret_flesch_reading_ease,
)
from .dependencies import get_services
from .schemas import (
    AIEstimateRequest,
    BertEstimateRequest,
    EstimateRequest,
    EstimateResponse,
    FeaturesResponse,
    ImportCSVRequest,
    ImportCSVResponse,
    ReadabilityRequest,
    ReadabilityResponse,
    SaveTaskRequest,
    SaveTaskResponse,
    TaskText,
    TrainResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter()


# Estimation

@router.post("/estimate", response_model=EstimateResponse)
def estimate_task(req: EstimateRequest, services: EstimatorServices = Depends(get_services)):
    request_id = str(uuid.uuid4())
    result = services.agent.invoke({
        "title": req.title,
        "description": req.description,
        "task_type": req.task_type,
        "ai_model": req.ai_model,
        "use_bert": req.use_bert,
        "taxonomy": services.store.load_taxonomy(),
        "errors": [],
    })
    logger.info("estimate_completed", request_id=request_id, final_points=result["final_points"],
                source=result["final_source"])
    return EstimateResponse.model_validate({
        **result,
        "request_id": request_id,
        "errors": result.get("errors") or [],
    })


@router.post("/estimate/ai", response_model=AIEstimate)
def estimate_with_ai(req: AIEstimateRequest, services: EstimatorServices = Depends(get_services)):
    try:
        return services.llm.estimate(req.description, req.task_type, req.model)
    except AIEstimationError as e:
        return JSONResponse(status_code=e.status_code, content=e.to_dict())


@router.post("/estimate/bert", response_model=BertPrediction)
def estimate_with_bert(req: BertEstimateRequest, services: EstimatorServices = Depends(get_services)):
    prediction = services.bert.classify(req.title, req.description)
    if prediction is None:
        raise HTTPException(status_code=503, detail="BERT classification failed. Check that the model is loaded.")
    return prediction


@router.post("/explain", response_model=ScoreBreakdown)
def explain_estimate(req: TaskText, services: EstimatorServices = Depends(get_services)):
    return explain(req.description, req.task_type, services.store.load_taxonomy())


@router.post("/features", response_model=FeaturesResponse)
def task_features(req: TaskText, services: EstimatorServices = Depends(get_services)):
    return FeaturesResponse(features=extract_features(req.description, req.task_type, services.store.load_taxonomy()))


# Task history

@router.get("/tasks", response_model=list[Task])
def list_tasks(services: EstimatorServices = Depends(get_services)):
    return services.store.load_tasks()


@router.post("/tasks", response_model=SaveTaskResponse, status_code=201)
def save_task(req: SaveTaskRequest, services: EstimatorServices = Depends(get_services)):
    task = Task(
        id=uuid.uuid4().hex,
        estimated_points=estimate(req.description, req.task_type, services.store.load_taxonomy()),
        created_at=datetime.now(timezone.utc),
        **req.model_dump(),
    )
    tasks = services.store.add_tasks([task])
    retrained = services.retrain()
    logger.info("task_saved", task_id=task.id, total_tasks=len(tasks), retrained=retrained)
    return SaveTaskResponse(task_id=task.id, total_tasks=len(tasks), model_retrained=retrained)


@router.post("/tasks/import", response_model=ImportCSVResponse)
def import_tasks(req: ImportCSVRequest, services: EstimatorServices = Depends(get_services)):
    try:
        rows = parse_csv(req.content)
    except CSVImportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not rows:
        raise HTTPException(status_code=400, detail="No valid rows found in the CSV file")

    tasks = services.store.add_tasks(csv_rows_to_tasks(rows))
    retrained = services.retrain()
    logger.info("tasks_imported", imported=len(rows), total_tasks=len(tasks), retrained=retrained)
    return ImportCSVResponse(imported=len(rows), total_tasks=len(tasks), model_retrained=retrained)


@router.get("/tasks/sample-csv", response_class=PlainTextResponse)
def sample_csv():
    return PlainTextResponse(
        generate_sample_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="exemplo-tasks.csv"'},
    )


# Keyword configuration

@router.get("/keywords", response_model=KeywordTaxonomy)
def get_keywords(services: EstimatorServices = Depends(get_services)):
    return services.store.load_taxonomy()


@router.put("/keywords", response_model=KeywordTaxonomy)
def update_keywords(taxonomy: KeywordTaxonomy, services: EstimatorServices = Depends(get_services)):
    services.store.save_taxonomy(taxonomy)
    logger.info("keywords_updated")
    return taxonomy


@router.delete("/keywords", response_model=KeywordTaxonomy)
def reset_keywords(services: EstimatorServices = Depends(get_services)):
    logger.info("keywords_reset")
    return services.store.reset_taxonomy()


# Local ML model

@router.get("/model/stats", response_model=ModelStats)
def model_stats(services: EstimatorServices = Depends(get_services)):
    return services.store.load_model_stats()


@router.post("/model/train", response_model=TrainResponse)
def train_model(services: EstimatorServices = Depends(get_services)):
    trained = services.retrain()
    return TrainResponse(trained=trained, trained_on=services.store.load_model_stats().trained_on)


# Transformer model

@router.get("/bert/status", response_model=BertModelInfo)
def bert_status(services: EstimatorServices = Depends(get_services)):
    return services.bert.info()


@router.post("/bert/load", response_model=BertModelInfo)
def bert_load(services: EstimatorServices = Depends(get_services)):
    try:
        services.bert.load()
    except ModelLoadError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return services.bert.info()


# Readability

@router.post("/readability", response_model=ReadabilityResponse)
def readability(req: ReadabilityRequest):
    metrics = calculate_readability_metrics(req.text)
    return ReadabilityResponse(
        metrics=metrics,
        reading_ease=interpret_flesch_reading_ease(metrics.flesch_reading_ease),
        grade_level=interpret_flesch_kincaid_grade(metrics.flesch_kincaid_grade),
    )
