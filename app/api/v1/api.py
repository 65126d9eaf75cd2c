"""API v1 router aggregation"""
from fastapi import APIRouter
from app.api.v1.endpoints import auth_endpoints, user_endpoints, post_endpoints
from app.api.v1.endpoints import comment_endpoints
from app.api.v1.endpoints import story_endpoints
from app.api.v1.endpoints import chat_endpoints

api_router = APIRouter()

api_router.include_router(auth_endpoints.router,    prefix="/auth",     tags=["Authentication"])
api_router.include_router(user_endpoints.router,    prefix="/users",    tags=["Users"])
api_router.include_router(post_endpoints.router,    prefix="/posts",    tags=["Posts"])
api_router.include_router(comment_endpoints.router, prefix="/comments", tags=["Comments"])
api_router.include_router(story_endpoints.router,   prefix="/stories",  tags=["Stories"])
api_router.include_router(chat_endpoints.router,    prefix="/chat",     tags=["Chat"])
