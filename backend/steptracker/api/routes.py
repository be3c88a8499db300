"""Saved routes: named, reusable paths a user can walk again (drawn or auto-generated)."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from steptracker.api.deps import current_user_id
from steptracker.db import get_db
from steptracker.models.saved_route import SavedRoute
from steptracker.schemas.route import (
    FavoriteUpdate,
    SavedRouteCreate,
    SavedRouteRead,
    SavedRouteUpdate,
)


router = APIRouter(prefix="/routes", tags=["routes"])


def _get_owned(db: Session, route_id: int, user_id: str) -> SavedRoute:
    route = (
        db.query(SavedRoute)
        .filter(SavedRoute.id == route_id, SavedRoute.user_id == user_id)
        .first()
    )
    if not route:
        raise HTTPException(status_code=404, detail="Saved route not found")
    return route


@router.post("/", response_model=SavedRouteRead, status_code=201)
def create_route(
    payload: SavedRouteCreate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    route = SavedRoute(user_id=user_id, **payload.model_dump())
    db.add(route)
    db.commit()
    db.refresh(route)
    return route


@router.get("/", response_model=list[SavedRouteRead])
def list_routes(
    favorites: Optional[bool] = Query(None),
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    """
    Newest first.

      GET /routes?favorites=true
    """
    query = db.query(SavedRoute).filter(SavedRoute.user_id == user_id)
    if favorites:
        query = query.filter(SavedRoute.is_favorite.is_(True))
    return query.order_by(SavedRoute.created_at.desc(), SavedRoute.id.desc()).all()


@router.get("/{route_id}", response_model=SavedRouteRead)
def get_route(
    route_id: int,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    return _get_owned(db, route_id, user_id)


@router.put("/{route_id}", response_model=SavedRouteRead)
def update_route(
    route_id: int,
    payload: SavedRouteUpdate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    route = _get_owned(db, route_id, user_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        # required columns cannot be nulled
        if value is None and key in ("name", "distance_meters", "route_polyline", "is_favorite"):
            continue
        setattr(route, key, value)
    db.commit()
    db.refresh(route)
    return route


@router.put("/{route_id}/favorite", response_model=SavedRouteRead)
def set_favorite(
    route_id: int,
    payload: FavoriteUpdate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    route = _get_owned(db, route_id, user_id)
    route.is_favorite = payload.is_favorite
    db.commit()
    db.refresh(route)
    return route


@router.delete("/{route_id}")
def delete_route(
    route_id: int,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    route = _get_owned(db, route_id, user_id)
    db.delete(route)
    db.commit()
    return {"message": "Saved route deleted"}
