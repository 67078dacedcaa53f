"""Tests for quicklook loggers."""

import logging

from quicklook.logging import decoder_logger, get_logger, plot_logger, render_logger


class TestGetLogger:
    """Tests for get_logger."""

    def test_names_are_namespaced(self):
        assert get_logger('tests.stage').name == 'quicklook.tests.stage'
        assert get_logger('quicklook.tests.other').name == 'quicklook.tests.other'

    def test_handler_added_once(self):
        first = get_logger('tests.once')
        second = get_logger('tests.once')
        assert first is second
        assert len(second.handlers) == 1
        assert isinstance(second.handlers[0], logging.StreamHandler)

    def test_does_not_propagate(self):
        assert not get_logger('tests.quiet').propagate

    def test_stage_loggers(self):
        assert decoder_logger.name == 'quicklook.decoder'
        assert render_logger.name == 'quicklook.render'
        assert plot_logger.name == 'quicklook.plot'
