# ==================== UTILS/DISTANCE_CALCULATOR.PY ====================
from geopy.distance import geodesic


class DistanceCalculator:
    """Calculate distance and ETA between two points"""

    @staticmethod
    def get_distance_km(lat1, lng1, lat2, lng2):
        """Get distance in kilometers"""
        coord1 = (lat1, lng1)
        coord2 = (lat2, lng2)
        return geodesic(coord1, coord2).km

    @staticmethod
    def calculate_eta(distance_km, avg_speed_kmh=40):
        """Calculate estimated time of arrival in minutes"""
        if distance_km == 0:
            return 0
        hours = distance_km / avg_speed_kmh
        return int(hours * 60)

    @staticmethod
    def spots_within_radius(spots, lat, lng, radius_km):
        """Return (spot, distance_km) pairs inside the radius, nearest first"""
        nearby = []
        for spot in spots:
            distance = DistanceCalculator.get_distance_km(lat, lng, spot.latitude, spot.longitude)
            if distance <= radius_km:
                nearby.append((spot, distance))
        nearby.sort(key=lambda pair: pair[1])
        return nearby
