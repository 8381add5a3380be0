from __future__ import annotations

import json
import logging
from functools import wraps
from typing import Any, Iterable, Optional

from django.core.exceptions import ObjectDoesNotExist
from django.db import IntegrityError
from django.http import Http404, HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .errors import ApiError, BadRequest, NotFound

logger = logging.getLogger(__name__)


# ---------- Respuestas ----------

def json_response(data: Any, status: int = 200) -> JsonResponse:
    return JsonResponse(data, status=status, safe=False)


def error_response(message: str, status: int, details: Any = None) -> JsonResponse:
    payload: dict[str, Any] = {"error": message}
    if details is not None:
        payload["details"] = details
    return JsonResponse(payload, status=status)


# ---------- Entrada ----------

def json_body(request: HttpRequest) -> dict:
    """
    Cuerpo JSON como dict. Cuerpo vacío -> {}.
    Para multipart/form-data se devuelve request.POST aplanado.
    """
    content_type = request.content_type or ""
    if content_type.startswith("multipart/") or content_type == "application/x-www-form-urlencoded":
        return {k: request.POST.get(k) for k in request.POST.keys()}
    raw = request.body or b""
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        raise BadRequest("Invalid JSON body")
    if not isinstance(data, dict):
        raise BadRequest("JSON body must be an object")
    return data


def query_int(request: HttpRequest, name: str) -> Optional[int]:
    raw = (request.GET.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise BadRequest(f"{name} must be an integer")


def get_or_404(queryset, message: str, **lookup):
    """Como get_object_or_404 pero con mensaje JSON propio."""
    try:
        return queryset.get(**lookup)
    except queryset.model.DoesNotExist:
        raise NotFound(message)


# ---------- Decorador ----------

def api_view(methods: Iterable[str] = ("GET",)):
    """
    Envuelve una vista JSON:
      • exenta de CSRF (clientes con bearer token)
      • 405 si el método no está permitido
      • traduce errores a {"error", "details"}:
          ApiError -> su status; IntegrityError -> 409;
          ObjectDoesNotExist/Http404 -> 404; resto -> 500 (con traceback en log)
    """
    allowed = tuple(m.upper() for m in methods)

    def decorator(view):
        @wraps(view)
        def wrapper(request: HttpRequest, *args, **kwargs):
            if request.method not in allowed:
                resp = error_response("Method not allowed", 405)
                resp["Allow"] = ", ".join(allowed)
                return resp
            try:
                return view(request, *args, **kwargs)
            except ApiError as exc:
                if exc.status_code >= 500:
                    logger.error("%s %s -> %s", request.method, request.path, exc.message)
                return error_response(exc.message, exc.status_code, exc.details)
            except IntegrityError as exc:
                logger.warning("Conflicto de integridad en %s: %s", request.path, exc)
                return error_response("Resource already exists or violates a constraint", 409)
            except (ObjectDoesNotExist, Http404) as exc:
                return error_response(str(exc) or "Not found", 404)
            except Exception as exc:
                logger.exception("Error no controlado en %s %s", request.method, request.path)
                return error_response(str(exc) or "Internal server error", 500)

        return csrf_exempt(wrapper)

    return decorator


@api_view(["GET"])
def health(request: HttpRequest) -> JsonResponse:
    return json_response({"ok": True})
