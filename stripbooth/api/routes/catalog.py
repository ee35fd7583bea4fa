from fastapi import APIRouter

from stripbooth.config import settings
from stripbooth.models.booth import CatalogResponse, FilterInfo, PatternKind, TemplateInfo, TemplateType
from stripbooth.services.filters import FILTERS

router = APIRouter(prefix="/catalog", tags=["catalog"])

TEMPLATE_ORDER = [TemplateType.classic, TemplateType.quad, TemplateType.duo]


@router.get("", response_model=CatalogResponse)
async def get_catalog():
    return CatalogResponse(
        filters=[FilterInfo(id=preset.id, name=preset.name, css=preset.css) for preset in FILTERS.values()],
        templates=[
            TemplateInfo(id=template, name=f"{settings.template_slots[template.value]} Photos",
                         slots=settings.template_slots[template.value])
            for template in TEMPLATE_ORDER
        ],
        patterns=list(PatternKind)
    )
