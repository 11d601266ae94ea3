class AppStatusCode:
    # Generic failures
    OPERATION_FAILED = "200"
    OPERATION_ERROR = "201"
    INVALID_INPUT = "202"

    # Authentication
    AUTHENTICATION_TOKEN_INVALID = "300"
    AUTHENTICATION_USER_INACTIVE = "302"

    # Inventory / production
    STOCK_ITEM_IN_USE = "400"
    INVALID_STATE_TRANSITION = "402"
