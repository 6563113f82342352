from django.db import connection
from django.http import JsonResponse


def health_check(request):
    """Liveness probe; also confirms the database answers."""
    with connection.cursor() as cursor:
        cursor.execute('SELECT 1')
    return JsonResponse({'status': 'ok'})


# Same {"error": ...} body the API views return, so clients parse one shape

def error_404(request, exception):
    return JsonResponse({'error': f'Not found: {request.path}'}, status=404)


def error_500(request):
    return JsonResponse({'error': 'Internal server error'}, status=500)
