"""
Tests for daemon/protocol.py - request framing, completeness and decoding.
"""

import json
import unittest

from tremote.daemon.protocol import (
    RPC_PATH,
    SESSION_HEADER,
    RpcRequest,
    RpcResponse,
    build_frame,
    decode_response,
    frame_complete,
    header_value,
    interpret_status,
    parse_status,
    split_frame,
)
from tremote.daemon.state import SessionState
from tremote.exceptions import (
    ApplicationError,
    ConflictError,
    DecodeError,
    IncompleteFrameError,
)


def http_response(status: int, body: bytes, headers: str = "") -> bytes:
    return (
        f"HTTP/1.1 {status} Reason\r\n"
        f"{headers}"
        f"Content-Length: {len(body)}\r\n"
        "\r\n"
    ).encode("latin-1") + body


class TestBuildFrame(unittest.TestCase):
    """Outbound frame layout."""

    def test_frame_layout(self):
        request = RpcRequest("torrent-get", {"fields": ["id"]}, tag=7)
        frame = build_frame(request, "abc")

        header_lines, body = split_frame(frame)
        self.assertEqual(header_lines[0], f"POST {RPC_PATH} HTTP/1.1")
        self.assertEqual(header_value(header_lines, SESSION_HEADER), "abc")
        self.assertEqual(int(header_value(header_lines, "Content-Length")), len(body))
        self.assertIn(f"Content-length: {len(body)}", header_lines)
        self.assertEqual(body, request.to_payload())

    def test_empty_token_still_sends_header(self):
        frame = build_frame(RpcRequest("session-get"), "")
        self.assertIn(f"{SESSION_HEADER}: \r\n".encode(), frame)

    def test_round_trip_recovers_request(self):
        request = RpcRequest("torrent-add", {"filename": "magnet:?xt=ünï"}, tag="t-1")
        frame = build_frame(request, "tok")

        self.assertTrue(frame_complete(frame))
        _, body = split_frame(frame)
        decoded = json.loads(body.decode("utf-8"))
        self.assertEqual(decoded["method"], "torrent-add")
        self.assertEqual(decoded["arguments"], {"filename": "magnet:?xt=ünï"})
        self.assertEqual(decoded["tag"], "t-1")

    def test_length_counts_bytes_not_characters(self):
        request = RpcRequest("torrent-add", {"filename": "日本語.torrent"})
        frame = build_frame(request, "")
        header_lines, body = split_frame(frame)

        declared = int(header_value(header_lines, "content-length"))
        self.assertEqual(declared, len(request.to_payload()))
        self.assertNotEqual(declared, len(request.to_payload().decode("utf-8")))


class TestFrameComplete(unittest.TestCase):
    """Completeness test over accumulated bytes."""

    def setUp(self):
        body = json.dumps(
            {"result": "success", "arguments": {"name": "Ünïcödé ☃ 日本"}},
            ensure_ascii=False,
        ).encode("utf-8")
        self.body = body
        self.frame = http_response(200, body)

    def test_payload_has_multibyte_characters(self):
        self.assertNotEqual(len(self.body), len(self.body.decode("utf-8")))

    def test_every_prefix_is_incomplete_until_last_byte(self):
        for cut in range(len(self.frame)):
            self.assertFalse(frame_complete(self.frame[:cut]), f"complete at {cut}")
        self.assertTrue(frame_complete(self.frame))

    def test_chunked_accumulation(self):
        for chunk_size in (1, 2, 3, 5, 7, 16):
            data = b""
            completed_at = None
            for offset in range(0, len(self.frame), chunk_size):
                data += self.frame[offset:offset + chunk_size]
                if frame_complete(data):
                    completed_at = len(data)
                    break
            self.assertEqual(completed_at, len(self.frame), f"chunk size {chunk_size}")

    def test_extra_bytes_after_body_still_complete(self):
        self.assertTrue(frame_complete(self.frame + b"trailing"))

    def test_missing_terminator_is_incomplete(self):
        self.assertFalse(frame_complete(b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n"))

    def test_missing_length_header_is_incomplete(self):
        self.assertFalse(frame_complete(b"HTTP/1.1 200 OK\r\n\r\n{}"))

    def test_zero_length_body(self):
        self.assertTrue(frame_complete(b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n"))

    def test_negative_length_is_incomplete(self):
        self.assertFalse(frame_complete(b"HTTP/1.1 200 OK\r\nContent-Length: -5\r\n\r\n{}"))


class TestStatus(unittest.TestCase):
    """Status line parsing and conflict handling."""

    def test_parse_status(self):
        self.assertEqual(parse_status(http_response(200, b"{}")), 200)

    def test_parse_status_rejects_garbage(self):
        with self.assertRaises(DecodeError):
            parse_status(b"")
        with self.assertRaises(DecodeError):
            parse_status(b"<html>\r\n")

    def test_reply_cut_inside_status_line(self):
        with self.assertRaises(IncompleteFrameError):
            parse_status(b"")
        with self.assertRaises(IncompleteFrameError):
            parse_status(b"HTTP/1.")
        # a complete header block with a bad status line is not a truncation
        with self.assertRaises(DecodeError) as ctx:
            parse_status(b"<html>\r\n\r\n")
        self.assertNotIsInstance(ctx.exception, IncompleteFrameError)

    def test_conflict_updates_token_and_raises(self):
        session = SessionState()
        data = http_response(409, b"<h1>409</h1>", headers=f"{SESSION_HEADER}: T1\r\n")

        with self.assertRaises(ConflictError) as ctx:
            interpret_status(data, session)

        self.assertEqual(session.token, "T1")
        self.assertEqual(ctx.exception.token, "T1")

    def test_conflict_header_is_case_insensitive(self):
        session = SessionState(token="old")
        data = http_response(409, b"", headers="x-transmission-session-id: NEW\r\n")
        with self.assertRaises(ConflictError):
            interpret_status(data, session)
        self.assertEqual(session.token, "NEW")

    def test_success_leaves_token_alone(self):
        session = SessionState(token="keep")
        status = interpret_status(http_response(200, b"{}"), session)
        self.assertEqual(status, 200)
        self.assertEqual(session.token, "keep")


class TestDecodeResponse(unittest.TestCase):
    """Body decoding."""

    def test_decode_success(self):
        body = json.dumps({"result": "success", "arguments": {"torrents": []}}).encode()
        response = decode_response(http_response(200, body))
        self.assertEqual(response, RpcResponse("success", {"torrents": []}))
        self.assertTrue(response.ok)

    def test_decode_ignores_bytes_past_declared_length(self):
        body = b'{"result": "success"}'
        response = decode_response(http_response(200, body) + b"garbage")
        self.assertTrue(response.ok)

    def test_malformed_json(self):
        with self.assertRaises(DecodeError) as ctx:
            decode_response(http_response(200, b"not json"))
        self.assertNotIsInstance(ctx.exception, IncompleteFrameError)

    def test_truncated_body(self):
        full = http_response(200, b'{"result": "success", "arguments": {}}')
        with self.assertRaises(IncompleteFrameError):
            decode_response(full[:-5])

    def test_missing_header_block(self):
        with self.assertRaises(IncompleteFrameError):
            decode_response(b"HTTP/1.1 200 OK\r\nContent-Le")

    def test_body_without_result(self):
        with self.assertRaises(DecodeError):
            decode_response(http_response(200, b"[1, 2]"))

    def test_ensure_success(self):
        failed = RpcResponse("duplicate torrent")
        self.assertFalse(failed.ok)
        with self.assertRaises(ApplicationError) as ctx:
            failed.ensure_success()
        self.assertEqual(ctx.exception.message, "duplicate torrent")

        ok = RpcResponse("success", {})
        self.assertIs(ok.ensure_success(), ok)


if __name__ == "__main__":
    unittest.main()
