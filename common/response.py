from flask import jsonify

def success_response(data, status_code=200, **extra):
    response = {"data": data}
    response.update(extra)
    return jsonify(response), status_code

def error_response(message, status_code=400, errors=None):
    response = {"message": message}
    if errors:
        response["errors"] = errors
    return jsonify(response), status_code
