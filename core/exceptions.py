# core/exceptions.py

from rest_framework import status
from rest_framework.exceptions import APIException


class InsufficientStock(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Insufficient stock at the selected location.'
    default_code = 'insufficient_stock'


class NegativeStock(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Stock cannot go below zero.'
    default_code = 'negative_stock'


class InstallmentMismatch(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Installment amounts must add up to the sale total.'
    default_code = 'installment_mismatch'
