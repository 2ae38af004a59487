"""
Tests for the reachability probe.
"""

import unittest
import sys
import os
import socket
from unittest.mock import AsyncMock, patch

import aiohttp
from aiohttp import web
from aiohttp.test_utils import TestServer

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from systems import probe
from systems.probe import is_reachable


class TestHeuristic(unittest.IsolatedAsyncioTestCase):
    """Test the checks that run before any network access."""

    async def asyncSetUp(self):
        self.resolve = AsyncMock(return_value=True)
        self.head = AsyncMock(return_value=200)
        patcher_resolve = patch.object(probe, "_resolve", self.resolve)
        patcher_head = patch.object(probe, "_head_status", self.head)
        patcher_resolve.start()
        patcher_head.start()
        self.addCleanup(patcher_resolve.stop)
        self.addCleanup(patcher_head.stop)

    async def test_rejects_unparsable_urls(self):
        for url in ["not a url", "", "example.com/path", "http://", "//example.com", "http://[::1"]:
            self.assertFalse(await is_reachable(url), url)
        self.resolve.assert_not_awaited()

    async def test_localhost_accepted_without_probe(self):
        """Test the local carve-out skips DNS and HEAD."""
        self.assertTrue(await is_reachable("http://localhost/ok"))
        self.assertTrue(await is_reachable("http://localhost:9999/ok"))
        self.resolve.assert_not_awaited()
        self.head.assert_not_awaited()

    async def test_localhost_lookalike_is_checked(self):
        """Test that only the exact localhost host gets the carve-out."""
        self.assertFalse(await is_reachable("http://localhostfoo/ok"))
        self.assertTrue(await is_reachable("http://localhost.example.com/ok"))
        self.resolve.assert_awaited_once_with("localhost.example.com")

    async def test_bare_hostname_rejected(self):
        self.assertFalse(await is_reachable("http://intranet/status"))
        self.resolve.assert_not_awaited()

    async def test_pseudo_tld_length(self):
        """Test the 2 to 6 character bound on the last label."""
        self.assertFalse(await is_reachable("http://example.c/"))
        self.assertFalse(await is_reachable("http://example.technology/"))
        self.assertFalse(await is_reachable("http://10.0.0.1/"))
        self.assertTrue(await is_reachable("http://example.io/"))
        self.assertTrue(await is_reachable("https://example.museum/"))

    async def test_port_is_not_part_of_tld(self):
        self.assertTrue(await is_reachable("http://api.example.com:8080/health"))
        self.head.assert_awaited_once_with("http://api.example.com:8080/health")


class TestNetworkChecks(unittest.IsolatedAsyncioTestCase):
    """Test DNS and HEAD outcomes."""

    async def test_dns_failure(self):
        with patch.object(probe, "_resolve", AsyncMock(side_effect=socket.gaierror("no such host"))), \
                patch.object(probe, "_head_status", AsyncMock(return_value=200)) as head:
            self.assertFalse(await is_reachable("http://missing.example.com/"))
            head.assert_not_awaited()

    async def test_head_status(self):
        """Test that any status below 400 counts as reachable."""
        cases = {200: True, 204: True, 301: True, 399: True, 400: False, 404: False, 503: False}
        for status, expected in cases.items():
            with patch.object(probe, "_resolve", AsyncMock(return_value=True)), \
                    patch.object(probe, "_head_status", AsyncMock(return_value=status)):
                self.assertEqual(await is_reachable("https://example.com/"), expected, status)

    async def test_head_error(self):
        with patch.object(probe, "_resolve", AsyncMock(return_value=True)), \
                patch.object(probe, "_head_status", AsyncMock(side_effect=aiohttp.ClientConnectionError("refused"))):
            self.assertFalse(await is_reachable("https://example.com/"))


class TestHeadStatus(unittest.IsolatedAsyncioTestCase):
    """Test the HEAD request against a local server."""

    async def asyncSetUp(self):
        async def moved(request):
            raise web.HTTPFound("/elsewhere")

        async def elsewhere(request):
            return web.Response(text="here")

        app = web.Application()
        app.router.add_route("HEAD", "/moved", moved)
        app.router.add_route("HEAD", "/elsewhere", elsewhere)
        self.server = TestServer(app, host="127.0.0.1")
        await self.server.start_server()

    async def asyncTearDown(self):
        await self.server.close()

    async def test_redirect_not_followed(self):
        status = await probe._head_status(str(self.server.make_url("/moved")))
        self.assertEqual(status, 302)

    async def test_missing_route(self):
        status = await probe._head_status(str(self.server.make_url("/nothing")))
        self.assertEqual(status, 404)


if __name__ == '__main__':
    unittest.main()
