import time
import json
import logging
import inspect
from typing import Optional
from functools import wraps

logger = logging.getLogger("columnmath.telemetry")


def emit_event(event: str, *, route: str, version: str, skill_tag: Optional[str] = None,
               error_type: Optional[str] = None, latency_ms: Optional[int] = None,
               ok: Optional[bool] = None):
    payload = {
        "event": event,
        "route": route,
        "version": version,
        "skill_tag": skill_tag,
        "error_type": error_type,
        "latency_ms": latency_ms,
        "ok": ok,
        "ts": time.time(),
    }
    # log as single-line JSON for easy parsing in prod
    logger.info("telemetry=%s", json.dumps(payload, separators=(",", ":")))


def instrument(route: str, version: str):
    def deco(fn):
        if inspect.iscoroutinefunction(fn):
            @wraps(fn)
            async def wrapped_async(*args, **kwargs):
                t0 = time.time()
                ok = True
                err = None
                try:
                    return await fn(*args, **kwargs)
                except Exception as e:
                    ok = False
                    err = e.__class__.__name__
                    raise
                finally:
                    dt = int((time.time() - t0) * 1000)
                    emit_event("api_call", route=route, version=version, latency_ms=dt, ok=ok,
                               error_type=err)
            return wrapped_async

        @wraps(fn)
        def wrapped(*args, **kwargs):
            t0 = time.time()
            ok = True
            err = None
            try:
                return fn(*args, **kwargs)
            except Exception as e:
                ok = False
                err = e.__class__.__name__
                raise
            finally:
                dt = int((time.time() - t0) * 1000)
                emit_event("api_call", route=route, version=version, latency_ms=dt, ok=ok,
                           error_type=err)
        return wrapped
    return deco
