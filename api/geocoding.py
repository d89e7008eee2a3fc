from flask import Blueprint, request, jsonify, current_app

from models.schemas.zone import GeocodeQuerySchema, SearchQuerySchema, GeocodeResultOutSchema

bp = Blueprint("geocoding", __name__, url_prefix="/geocode")

geocode_query_schema = GeocodeQuerySchema()
search_query_schema = SearchQuerySchema()
geocode_result_out_schema = GeocodeResultOutSchema()
geocode_result_list_out_schema = GeocodeResultOutSchema(many=True)


@bp.get("")
def geocode():
    """
    Convert an address to coordinates (restricted to the configured country)
    ---
    tags:
      - Geocoding
    parameters:
      - { in: query, name: address, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: Address not found }
      502: { description: Geocoding service error }
    """
    query = geocode_query_schema.load(request.args.to_dict())
    result = current_app.extensions["geocoder"].geocode(query["address"])
    return jsonify(geocode_result_out_schema.dump(result)), 200


@bp.get("/search")
def search():
    """
    Address suggestions for autocomplete
    ---
    tags:
      - Geocoding
    parameters:
      - { in: query, name: query, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: Nothing found }
      502: { description: Geocoding service error }
    """
    query = search_query_schema.load(request.args.to_dict())
    results = current_app.extensions["geocoder"].geocode_multiple(query["query"])
    return jsonify({"results": geocode_result_list_out_schema.dump(results)}), 200
