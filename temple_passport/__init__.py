"""Temple passport progression and merit economy engine"""
