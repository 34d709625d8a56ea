from fastapi import APIRouter, Depends

from skillcorpus import __version__
from skillcorpus.dependencies import get_corpus
from skillcorpus.skills.registry import SkillCorpus

router = APIRouter()


@router.get("/health")
async def health_check(corpus: SkillCorpus = Depends(get_corpus)):
    return {
        "status": "healthy",
        "service": "skillcorpus",
        "version": __version__,
        "skills": len(corpus),
    }
