from fastapi import APIRouter, Depends

from goal_tracker.schemas.goal import RewriteEnvelope, RewriteRequest
from goal_tracker.services.rewrite import GoalRewriter, get_rewriter

router = APIRouter(prefix="/api", tags=["rewrite"])


@router.post("/rewriteGoal", response_model=RewriteEnvelope)
async def rewrite_goal(
    body: RewriteRequest,
    rewriter: GoalRewriter = Depends(get_rewriter),
):
    return RewriteEnvelope(goal=await rewriter.rewrite(body.goal))
