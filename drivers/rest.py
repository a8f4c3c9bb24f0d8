# Generic REST client for favorite / unfavorite / retweet.
#
# Each action is a POST to <base_url> + the action's path template, where
# "{id}" is replaced with the status id.  Any non-2xx answer is an error.
#
# Config keys (under rest.<instance_id>):
#   base_url         – API root, e.g. "https://api.example.com/1.1" (required)
#   token            – bearer token sent as "Authorization: Bearer <token>"
#   favorite_path    – default "/favorites/create.json?id={id}"
#   unfavorite_path  – default "/favorites/destroy.json?id={id}"
#   retweet_path     – default "/statuses/retweet/{id}.json"
#   headers          – dict of extra request headers

import aiohttp
from pydantic import Field

import services.logger as log
from services.config_schema import _DriverConfig
from services.error import raise_and_log
from drivers import BaseClient


class RestConfig(_DriverConfig):
    base_url:        str
    token:           str            = ""
    favorite_path:   str            = "/favorites/create.json?id={id}"
    unfavorite_path: str            = "/favorites/destroy.json?id={id}"
    retweet_path:    str            = "/statuses/retweet/{id}.json"
    headers:         dict[str, str] = Field(default_factory=dict)

l = log.get_logger()


class RestClient(BaseClient[RestConfig]):

    def __init__(self, instance_id: str, config: RestConfig):
        super().__init__(instance_id, config)
        self._session: aiohttp.ClientSession | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self):
        headers = dict(self.config.headers)
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        self._session = aiohttp.ClientSession(headers=headers)
        l.debug(f"REST [{self.instance_id}] targeting {self.config.base_url}")

    async def close(self):
        if self._session is not None and not self._session.closed:
            await self._session.close()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def favorite(self, status_id: int):
        await self._post(self.config.favorite_path, status_id)

    async def unfavorite(self, status_id: int):
        await self._post(self.config.unfavorite_path, status_id)

    async def retweet(self, status_id: int):
        await self._post(self.config.retweet_path, status_id)

    def url_for(self, path_template: str, status_id: int) -> str:
        return self.config.base_url.rstrip("/") + path_template.format(id=status_id)

    async def _post(self, path_template: str, status_id: int):
        if self._session is None:
            raise_and_log(f"REST [{self.instance_id}] client not started", RuntimeError)
        url = self.url_for(path_template, status_id)
        async with self._session.post(url) as resp:
            if not 200 <= resp.status < 300:
                body = await resp.text()
                raise aiohttp.ClientResponseError(
                    resp.request_info,
                    resp.history,
                    status=resp.status,
                    message=body[:200],
                )


from drivers.registry import register
register("rest", RestConfig, RestClient)
