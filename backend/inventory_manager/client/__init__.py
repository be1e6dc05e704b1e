from inventory_manager.client.facade import DataAccessFacade
from inventory_manager.client.network import NetworkApi
from inventory_manager.client.offline import OfflineApi
from inventory_manager.client.results import ApiResult, Outcome

__all__ = ["DataAccessFacade", "NetworkApi", "OfflineApi", "ApiResult", "Outcome"]
