from django.core.management.base import BaseCommand, CommandError

from TB_game.sync import force_full_sync, should_sync_fighters, sync_fighters, sync_game_data


class Command(BaseCommand):
    help = "Mirror fighters and game data from the TecHub API into the local store."

    def add_arguments(self, parser):
        parser.add_argument("--force", action="store_true", help="Resync every fighter even if the store is fresh.")
        parser.add_argument("--game-data-only", action="store_true", help="Only refresh the ruleset.")

    def handle(self, *args, **options):
        ok = sync_game_data()
        self.stdout.write(("game data synced" if ok else "game data sync FAILED"))

        if options["game_data_only"]:
            if not ok:
                raise CommandError("Sync failed, see log for details.")
            return

        if options["force"]:
            fighters_ok = force_full_sync()
        elif should_sync_fighters():
            fighters_ok = sync_fighters()
        else:
            self.stdout.write("fighters are fresh, skipping (use --force to resync)")
            fighters_ok = True

        if fighters_ok:
            self.stdout.write(self.style.SUCCESS("fighters synced"))
        if not (ok and fighters_ok):
            raise CommandError("Sync failed, see log for details.")
