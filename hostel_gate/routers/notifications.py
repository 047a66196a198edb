from fastapi import APIRouter, Depends, Query
from hostel_gate.dependencies import get_notifier
from hostel_gate.schemas.gate import NotificationOut
from hostel_gate.services.notification_service import NotificationFeed

router = APIRouter()


@router.get("/notifications", response_model=list[NotificationOut], summary="Recent toasts, newest first")
def get_notifications(limit: int = Query(20, ge=1, le=500), notifier: NotificationFeed = Depends(get_notifier)):
    return [n.to_dict() for n in notifier.recent(limit)]
