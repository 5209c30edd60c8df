import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd

from nq_constants import ReportingConstants


class FitnessHistoryPlotter:
    def __init__(self, csv_path):
        """
        Load the fitness history CSV written by RunReporter.export_fitness_history().
        """
        self.csv_path = csv_path
        self.data = pd.read_csv(csv_path)

    def plot_fitness_history(self, output_path=None, max_fitness=None):
        """
        Plot best, average and worst fitness per generation and save it as an image.

        A dashed line marks the solved fitness when max_fitness is given.
        Returns the path of the saved image.
        """
        if output_path is None:
            output_path = os.path.join(os.path.dirname(self.csv_path) or ".",
                                       ReportingConstants.FITNESS_PLOT_FILE)

        generations = self.data['generation']

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(generations, self.data['best_fitness'], linestyle='-', color='b', label='Best Fitness')
        ax.plot(generations, self.data['average_fitness'], linestyle='-', color='g', label='Average Fitness')
        ax.plot(generations, self.data['worst_fitness'], linestyle='-', color='r', label='Worst Fitness')
        if max_fitness is not None:
            ax.axhline(max_fitness, linestyle='--', color='k', label='Solved')

        ax.set_title('Fitness Across Generations')
        ax.set_xlabel('Generation')
        ax.set_ylabel('Non-attacking Pairs')
        ax.grid(True)
        ax.legend()

        fig.savefig(output_path)
        plt.close(fig)
        return output_path
