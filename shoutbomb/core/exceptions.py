class ShoutbombError(Exception): pass

class DataSourceError(ShoutbombError): pass

class ConfigurationError(ShoutbombError): pass

class OrgUnitNotFoundError(ConfigurationError): pass
