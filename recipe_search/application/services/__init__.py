from .instrumentation_service import InstrumentationService, Measurement
from .recommendation_application_service import RecommendationApplicationService
from .search_application_service import SearchApplicationService

__all__ = [
    'InstrumentationService',
    'Measurement',
    'RecommendationApplicationService',
    'SearchApplicationService'
]
