"""Weather provider service - dispatches host requests to background tasks."""
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Union

from request_guard import WEATHER_REQUEST_TYPES, RequestGuard
from weather_data import WeatherInfo, WeatherLocation
from weather_provider import (
    RequestStatus,
    RequestType,
    ServiceRequest,
    ServiceRequestResult,
    WeatherProviderError,
    WeatherProviderServiceBase,
)
from yahoo_weather_provider import YahooWeatherProvider

Payload = Union[WeatherInfo, List[WeatherLocation]]


class RequestTask:
    """Background work bound to one host request."""

    def __init__(
        self,
        request: ServiceRequest,
        work: Callable[[], Payload],
        on_finished: Callable[["RequestTask"], None],
    ):
        self.request = request
        self._work = work
        self._on_finished = on_finished
        # Reentrant: a host may cancel from inside its own complete()/fail()
        self._lock = threading.RLock()
        self._cancelled = False
        self.future: Optional[Future] = None

    @property
    def cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
        if self.future is not None:
            self.future.cancel()

    def run(self) -> None:
        try:
            if self.cancelled:
                return
            try:
                payload = self._work()
            except WeatherProviderError as e:
                logging.warning(f"Request failed: {e}")
                self._deliver(self.request.fail)
                return
            except Exception as e:
                logging.exception(f"Unexpected error while handling request: {e}")
                self._deliver(self.request.fail)
                return

            self._deliver(lambda: self.request.complete(ServiceRequestResult.of(payload)))
        finally:
            self._on_finished(self)

    def _deliver(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if not self._cancelled:
                callback()


class YahooWeatherProviderService(WeatherProviderServiceBase):
    """
    Provider plugin answering weather and city lookup requests from Yahoo.

    Weather requests for the place fetched last are rejected as
    SUBMITTED_TOO_SOON within the guard's time window.
    """

    def __init__(
        self,
        provider: YahooWeatherProvider,
        guard: Optional[RequestGuard] = None,
        executor: Optional[Executor] = None,
        max_workers: int = 4,
    ):
        """
        Initialize the service.

        Args:
            provider: Client used to talk to the weather API
            guard: Duplicate request guard (a default one is created if omitted)
            executor: Executor running the background tasks
            max_workers: Worker count for the default executor
        """
        self.provider = provider
        self.guard = guard or RequestGuard()
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="yahoo-weather"
        )

        self._weather_tasks: Dict[ServiceRequest, RequestTask] = {}
        self._weather_lock = threading.Lock()
        self._lookup_tasks: Dict[ServiceRequest, RequestTask] = {}
        self._lookup_lock = threading.Lock()

    def on_request_submitted(self, request: ServiceRequest) -> None:
        request_info = request.request_info
        request_type = request_info.request_type
        logging.debug(f"Received request type {request_type}")

        if request_type in WEATHER_REQUEST_TYPES:
            work = lambda: self._fetch_weather(request)
            tasks, lock, on_finished = self._weather_tasks, self._weather_lock, self._weather_finished
        elif request_type == RequestType.LOOKUP_CITY_NAME:
            work = lambda: self._lookup_city(request)
            tasks, lock, on_finished = self._lookup_tasks, self._lookup_lock, self._lookup_finished
        else:
            logging.warning(f"Received unknown request type {request_type}")
            return

        with lock:
            if not self.guard.try_submit(request_info):
                logging.info(f"Rejecting {request_type}: submitted too soon")
                status = RequestStatus.SUBMITTED_TOO_SOON
            else:
                task = RequestTask(request, work, on_finished)
                try:
                    task.future = self._executor.submit(task.run)
                except RuntimeError as e:
                    # Executor shut down: the work never runs, so the window never started
                    logging.error(f"Could not schedule {request_type}: {e}")
                    self.guard.revert_submission()
                    status = RequestStatus.FAILED
                else:
                    # on_finished takes the same lock, so the task can't be dropped before it's added
                    tasks[request] = task
                    return

        if status == RequestStatus.FAILED:
            request.fail()
        else:
            request.reject(status)

    def on_request_cancelled(self, request: ServiceRequest) -> None:
        request_type = request.request_info.request_type
        if request_type in WEATHER_REQUEST_TYPES:
            with self._weather_lock:
                task = self._weather_tasks.pop(request, None)
        elif request_type == RequestType.LOOKUP_CITY_NAME:
            with self._lookup_lock:
                task = self._lookup_tasks.pop(request, None)
        else:
            logging.warning(f"Received unknown request type {request_type}")
            return

        if task is not None:
            logging.debug(f"Cancelling {request_type} task")
            task.cancel()

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _fetch_weather(self, request: ServiceRequest) -> WeatherInfo:
        request_info = request.request_info
        if request_info.request_type == RequestType.WEATHER_BY_WEATHER_LOCATION:
            if request_info.weather_location is None:
                raise WeatherProviderError("Weather request without a weather location")
            weather_info = self.provider.get_weather_by_location(request_info.weather_location)
        else:
            if request_info.location is None:
                raise WeatherProviderError("Weather request without a location")
            weather_info = self.provider.get_weather_by_geo_location(request_info.location)

        self.guard.record_success(request_info)
        return weather_info

    def _lookup_city(self, request: ServiceRequest) -> List[WeatherLocation]:
        city_name = request.request_info.city_name
        if not city_name:
            raise WeatherProviderError("Lookup request without a city name")
        return self.provider.lookup_city(city_name)

    def _weather_finished(self, task: RequestTask) -> None:
        with self._weather_lock:
            if self._weather_tasks.get(task.request) is task:
                del self._weather_tasks[task.request]

    def _lookup_finished(self, task: RequestTask) -> None:
        with self._lookup_lock:
            if self._lookup_tasks.get(task.request) is task:
                del self._lookup_tasks[task.request]
