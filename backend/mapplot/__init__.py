"""
Plotly `scattermapbox` payloads for the frontend map widget.
"""
