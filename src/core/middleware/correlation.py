import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

CORRELATION_HEADER = "x-correlation-id"

# "-" fora de uma requisição (startup, scripts)
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="-")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
	"""Reaproveita o x-correlation-id recebido ou gera um; devolve no header da resposta"""

	async def dispatch(self, request: Request, call_next):
		cid = request.headers.get(CORRELATION_HEADER) or f"sr-{uuid.uuid4().hex[:16]}"
		request.state.correlation_id = cid
		token = correlation_id.set(cid)
		try:
			response = await call_next(request)
		finally:
			correlation_id.reset(token)
		response.headers[CORRELATION_HEADER] = cid
		return response


class CorrelationIdFilter(logging.Filter):
	"""Disponibiliza %(correlation_id)s no formato dos logs"""

	def filter(self, record: logging.LogRecord) -> bool:
		record.correlation_id = correlation_id.get()
		return True
