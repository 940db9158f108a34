from lovenote.navigation.app_controller import AppController, AppSnapshot

__all__ = ["AppController", "AppSnapshot"]
