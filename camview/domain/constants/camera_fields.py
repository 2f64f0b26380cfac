"""Constants for Camera model field names"""


class CameraFields:
    """Field name constants for Camera model"""
    ID = "id"
    NAME = "name"
    STREAM_URL = "stream_url"
    ONVIF_URL = "onvif_url"
    USERNAME = "username"
    PASSWORD = "password"

    # MongoDB specific
    MONGO_ID = "_id"  # MongoDB's internal _id field
