from stripbooth.services.session import booth_session


def get_booth_session():
    return booth_session


def get_exporter():
    return booth_session.exporter
