from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app

from models.schemas.common import CoordinateSchema
from models.schemas.zone import AddressQuerySchema, ZoneOutSchema

bp = Blueprint("zones", __name__)

coordinate_schema = CoordinateSchema()
address_query_schema = AddressQuerySchema()
zone_out_schema = ZoneOutSchema()
zone_list_out_schema = ZoneOutSchema(many=True)

OUT_OF_AREA = "Address is outside the service area"


def zone_index():
    return current_app.extensions["zone_index"]


@bp.get("/zones")
def list_zones():
    """
    List all active service zones
    ---
    tags:
      - Zones
    responses:
      200: { description: OK }
    """
    return jsonify({"zones": zone_list_out_schema.dump(zone_index().all_zones())}), 200


@bp.get("/zones/resolve")
def resolve_zone():
    """
    Find the service zone containing a coordinate
    ---
    tags:
      - Zones
    parameters:
      - { in: query, name: lat, type: number, required: true }
      - { in: query, name: lon, type: number, required: true }
    responses:
      200: { description: Zone or in_zone=false }
      422: { description: Validation error }
    """
    point = coordinate_schema.load(request.args.to_dict())
    zone = zone_index().resolve(point["lat"], point["lon"])
    return jsonify(
        {
            "latitude": point["lat"],
            "longitude": point["lon"],
            "in_zone": zone is not None,
            "zone": zone_out_schema.dump(zone) if zone else None,
        }
    ), 200


@bp.get("/zones/<city>")
def zones_by_city(city: str):
    """
    List active zones of a city (case-insensitive)

    The static /zones/resolve rule wins over this one, so a city named
    "resolve" cannot be listed here.
    ---
    tags:
      - Zones
    parameters:
      - { in: path, name: city, type: string, required: true }
    responses:
      200: { description: OK }
    """
    zones = zone_index().zones_for_city(city)
    return jsonify({"city": city, "zones": zone_list_out_schema.dump(zones)}), 200


@bp.get("/address/validate")
def validate_address():
    """
    Geocode an address and check whether it lies in a service zone
    ---
    tags:
      - Zones
    parameters:
      - { in: query, name: address, type: string, required: true }
      - { in: query, name: city, type: string, required: true }
    responses:
      200: { description: Geocoded; in_zone tells whether it is served }
      404: { description: Address not found }
      502: { description: Geocoding service error }
      504: { description: Geocoding timeout }
    """
    query = address_query_schema.load(request.args.to_dict())
    country = current_app.config["GEOCODING_COUNTRY_NAME"]
    full_address = f"{query['address']}, {query['city']}, {country}"

    location = current_app.extensions["geocoder"].geocode(full_address)
    zone = zone_index().resolve(location.lat, location.lon)

    body = {
        "in_zone": zone is not None,
        "zone_id": zone.id if zone else None,
        "zone_name": zone.name if zone else None,
        "latitude": location.lat,
        "longitude": location.lon,
        "display_name": location.display_name,
    }
    if zone is None:
        body["message"] = OUT_OF_AREA
    return jsonify(body), 200
