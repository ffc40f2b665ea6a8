# app.py
"""Process bootstrap: one order store and one reporting engine per process."""
from datetime import datetime
from typing import Callable, NamedTuple

from data.order_store import OrderStore
from services.report_service import ReportingEngine
from utils.logger import setup_logger


class Services(NamedTuple):
    store: OrderStore
    reports: ReportingEngine


def create_services(clock: Callable[[], datetime] | None = None,
                    configure_logging: bool = True) -> Services:
    # The store is built here and handed to consumers by reference;
    # there is no module level instance to reach for.
    if configure_logging:
        logger = setup_logger()
        logger.info("App: order store and reporting engine created")
    store = OrderStore(clock=clock)
    return Services(store=store, reports=ReportingEngine(store))
