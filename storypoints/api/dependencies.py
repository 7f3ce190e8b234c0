from functools import lru_cache

from storypoints.agent.graph import EstimatorServices, create_services


@lru_cache(maxsize=1)
def get_services() -> EstimatorServices:
    return create_services()
