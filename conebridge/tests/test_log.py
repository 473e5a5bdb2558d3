#  ___________________________________________________________________________
#
#  Pyomo: Python Optimization Modeling Objects
#  Copyright (c) 2008-2025
#  National Technology and Engineering Solutions of Sandia, LLC
#  Under the terms of Contract DE-NA0003525 with National Technology and
#  Engineering Solutions of Sandia, LLC, the U.S. Government retains certain
#  rights in this software.
#  This software is distributed under the 3-clause BSD License.
#  ___________________________________________________________________________

import logging
from io import StringIO

import pyomo.common.unittest as unittest
from pyomo.common.log import LoggingIntercept

import conebridge
from conebridge.log import conebridge_formatter, conebridge_handler, conebridge_logger


class TestLogging(unittest.TestCase):
    def test_handler_installed(self):
        self.assertIs(conebridge_logger, logging.getLogger('conebridge'))
        self.assertIn(conebridge_handler, conebridge_logger.handlers)

    def test_standard_format(self):
        OUT = StringIO()
        with LoggingIntercept(
            OUT, 'conebridge', logging.WARNING, formatter=conebridge_formatter
        ):
            logging.getLogger('conebridge.bridges.norm_to_lp').warning(
                "a simple message"
            )
        self.assertEqual(OUT.getvalue(), "WARNING: a simple message\n")

    def test_verbose_format(self):
        OUT = StringIO()
        with LoggingIntercept(
            OUT, 'conebridge', logging.DEBUG, formatter=conebridge_formatter
        ):
            logging.getLogger('conebridge.model').debug("a debug message")
        ans = OUT.getvalue()
        self.assertTrue(ans.startswith('DEBUG: "'))
        self.assertIn("test_verbose_format", ans)
        self.assertIn("\n    a debug message", ans)

    def test_root_handlers_silence_output(self):
        record = logging.LogRecord(
            'conebridge', logging.WARNING, __file__, 1, 'msg', None, None
        )
        root = logging.getLogger()
        handler = logging.NullHandler()
        root.addHandler(handler)
        try:
            self.assertFalse(conebridge_handler.filter(record))
        finally:
            root.removeHandler(handler)


class TestVersion(unittest.TestCase):
    def test_version(self):
        self.assertEqual(len(conebridge.version_info), 5)
        self.assertEqual(
            conebridge.__version__.split('.')[:3],
            [str(x) for x in conebridge.version_info[:3]],
        )
        self.assertTrue(conebridge.version.startswith(conebridge.__version__))


if __name__ == "__main__":
    unittest.main()
