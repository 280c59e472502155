"""USB HID transport."""

from .usb_connection import DeviceInfo, HIDConnection, PRODUCT_ID, VENDOR_ID
