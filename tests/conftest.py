"""Shared fixtures for the numstat test-suite."""

from __future__ import annotations

import logging

import pytest

from numstat import Statistics
from numstat.logutil import ROOT_LOGGER, get_logger


@pytest.fixture()
def stats():
	"""Engine with default options; diagnostics are recorded but not logged."""
	return Statistics(suppress_warnings=True)


@pytest.fixture()
def numstat_log(caplog):
	"""``caplog`` wired to the package logger, which does not propagate to the root logger."""
	log = get_logger(ROOT_LOGGER)
	log.addHandler(caplog.handler)
	previous = log.level
	log.setLevel(logging.DEBUG)
	try:
		yield caplog
	finally:
		log.setLevel(previous)
		log.removeHandler(caplog.handler)
