from typing import Any, Dict, Optional

import aiohttp

from config.settings import TenderlySettings, settings
from constants.constants import TENDERLY_DASHBOARD_URL
from models.tenderly import StorageEncodingRequest, StorageEncodingResponse, TenderlyPayload, TenderlySimulation
from utils.async_utils import async_retry
from utils.exceptions import ConfigurationError, TenderlyApiError, TenderlyRateLimitError
from utils.logger_utils import get_logger

logger = get_logger("Tenderly Client")

# Overrides by Solidity expression: {address: {"proposals[12].eta": "1700000000", ...}}
StateOverrides = Dict[str, Dict[str, str]]


class TenderlyClient:
    """
    Async client for the Tenderly simulation API.
    """

    def __init__(self, tenderly_settings: Optional[TenderlySettings] = None):
        self.config = tenderly_settings or settings.tenderly
        missing = [
            name
            for name, value in (
                ("TENDERLY_ACCESS_TOKEN", self.config.access_token),
                ("TENDERLY_USER", self.config.user),
                ("TENDERLY_PROJECT_SLUG", self.config.project_slug),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing Tenderly setting(s): {', '.join(missing)}")

        self.base_url = f"{self.config.base_url.rstrip('/')}/account/{self.config.user}/project/{self.config.project_slug}"
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Context manager entry"""
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            headers={"X-Access-Key": self.config.access_token, "User-Agent": f"{settings.app.name}/1.0"},
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        if self.session:
            await self.session.close()

    async def _post(self, path: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if self.session is None:
            raise RuntimeError("TenderlyClient must be used as an async context manager")

        url = f"{self.base_url}{path}"
        async with self.session.post(url, json=body or {}) as response:
            if response.status == 429:
                raise TenderlyRateLimitError(response.status, await response.text(), url)
            if response.status >= 300:
                text = await response.text()
                logger.error(f"Tenderly request failed. Status: {response.status}, Reason: {response.reason}")
                raise TenderlyApiError(response.status, text, url)
            # share endpoints answer with an empty body
            data = await response.json(content_type=None)
            return data or {}

    async def post(self, path: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """POST with exponential backoff on HTTP 429."""
        retrying = async_retry(
            max_retries=self.config.max_retries,
            initial_delay=1.0,
            backoff_factor=2.0,
            jitter=0.5,
            exceptions=(TenderlyRateLimitError,),
        )(self._post)
        return await retrying(path, body)

    async def simulate(self, payload: TenderlyPayload) -> TenderlySimulation:
        logger.info(f"Simulating call to {payload.to} on network {payload.network_id}...")
        data = await self.post("/simulate", payload.to_request())
        sim = TenderlySimulation.model_validate(data)
        logger.info(f"Simulation {sim.simulation.id} finished, status: {'success' if sim.simulation.status else 'reverted'}")
        return sim

    async def encode_state_overrides(self, network_id: str, overrides: StateOverrides) -> StorageEncodingResponse:
        """
        Translates overrides written as Solidity variable expressions into raw storage slots.
        """
        request = StorageEncodingRequest(
            network_id=network_id,
            state_overrides={address: {"value": values} for address, values in overrides.items()},
        )
        logger.debug(f"Encoding state overrides for {len(overrides)} contract(s) on network {network_id}")
        data = await self.post("/contracts/encode-states", request.to_request())
        return StorageEncodingResponse.model_validate(data)

    async def share_simulation(self, simulation_id: str) -> str:
        await self.post(f"/simulations/{simulation_id}/share")
        url = self.simulation_url(simulation_id)
        logger.info(f"Shared simulation: {url}")
        return url

    @staticmethod
    def simulation_url(simulation_id: str) -> str:
        return f"{TENDERLY_DASHBOARD_URL}/{simulation_id}"
