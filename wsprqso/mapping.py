"""
Interactive map of reconstructed contacts.
"""

import logging

import folium

from .locator import grid_center

logger = logging.getLogger(__name__)


def generate_map(records, output_file='contacts_map.html'):
    """ Generates an interactive map of the contacts."""
    m = folium.Map(location=[0, 0], zoom_start=2)

    for record in records:
        callsign = record.get('CALL', 'Unknown')
        grid = record.get('GRIDSQUARE')
        my_grid = record.get('MY_GRIDSQUARE')

        if not grid:
            continue

        try:
            lat, lon = grid_center(grid)
        except ValueError:
            logger.warning("Not mapping %s, bad locator %r", callsign, grid)
            continue

        folium.Marker(
            location=[lat, lon],
            popup=f"Callsign: {callsign}\nGrid: {grid}\nBand: {record.get('BAND', 'Unknown')}",
            icon=folium.Icon(color='blue', icon='info-sign')
        ).add_to(m)

        if my_grid:
            try:
                my_lat, my_lon = grid_center(my_grid)
            except ValueError:
                continue

            folium.PolyLine(
                locations=[[my_lat, my_lon], [lat, lon]],
                tooltip=f"{callsign} {record.get('DISTANCE', '?')} km",
                weight=1,
            ).add_to(m)

    m.save(output_file)
    return output_file
