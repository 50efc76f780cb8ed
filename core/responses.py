from rest_framework import status
from rest_framework.response import Response


def success_response(data=None, message=None, status_code=status.HTTP_200_OK, **extra):
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    body.update(extra)
    return Response(body, status=status_code)


def error_response(message, status_code=status.HTTP_400_BAD_REQUEST, errors=None):
    body = {'success': False, 'message': message}
    if errors:
        body['errors'] = errors
    return Response(body, status=status_code)


def first_error(errors):
    """Pull a readable message out of a serializer's error dict."""
    if isinstance(errors, dict):
        for field, value in errors.items():
            message = first_error(value)
            if field in ('non_field_errors', 'detail'):
                return message
            return f"{field}: {message}"
    if isinstance(errors, (list, tuple)) and errors:
        return first_error(errors[0])
    return str(errors)


def validation_error_response(serializer):
    return error_response(first_error(serializer.errors), errors=serializer.errors)
